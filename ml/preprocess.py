import cv2
import numpy as np
import torch
from ml.config import IMG_SIZE, MEAN, STD

def preprocess_bgr(frame_bgr):
    """
    frame_bgr -> torch.FloatTensor (1,3,IMG_SIZE,IMG_SIZE) in RGB, normalized.

    The whole frame is letterboxed to a square so banknote proportions survive
    the resize.
    """
    h, w = frame_bgr.shape[:2]
    side = max(h, w)
    top = (side - h) // 2
    left = (side - w) // 2
    square = cv2.copyMakeBorder(frame_bgr, top, side - h - top, left, side - w - left,
                                cv2.BORDER_CONSTANT, value=(0, 0, 0))

    rgb = cv2.cvtColor(square, cv2.COLOR_BGR2RGB)
    rgb = cv2.resize(rgb, (IMG_SIZE, IMG_SIZE), interpolation=cv2.INTER_AREA)

    x = rgb.astype("float32") / 255.0
    x = (x - np.array(MEAN, dtype=np.float32)) / np.array(STD, dtype=np.float32)
    x = np.transpose(x, (2, 0, 1))  # CHW
    x = np.expand_dims(x, 0)        # NCHW

    return torch.tensor(x, dtype=torch.float32)
