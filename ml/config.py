CLASSES = ["5-tl", "10-tl", "20-tl", "50-tl", "100-tl", "200-tl"]

IMG_SIZE = 224
MEAN = [0.485, 0.456, 0.406]
STD  = [0.229, 0.224, 0.225]

MODEL_PATH = "models/moneylens.pth"
TOP_K = 3
