import os
import numpy as np
import torch
import torch.nn as nn
from torchvision import models

from ml.config import CLASSES, TOP_K
from ml.preprocess import preprocess_bgr


def rank_candidates(probs, classes=CLASSES, top_k=TOP_K):
    """
    Turn a probability vector into ranked (label, confidence) pairs.

    Args:
        probs: Array-like of per-class probabilities
        classes: Label for each index
        top_k: Number of candidates to keep (all if None)

    Returns:
        List of (label, confidence), highest confidence first
    """
    probs = np.asarray(probs, dtype=np.float32).reshape(-1)
    if len(probs) != len(classes):
        raise ValueError(f"Expected {len(classes)} probabilities, got {len(probs)}")

    order = np.argsort(-probs, kind="stable")
    if top_k is not None:
        order = order[:top_k]
    return [(classes[int(i)], float(probs[int(i)])) for i in order]


class BanknoteClassifier:
    def __init__(self, model_path: str, top_k: int = TOP_K):
        if not os.path.exists(model_path):
            raise FileNotFoundError(f"Model file not found: {model_path}")

        self.top_k = top_k
        self.device = torch.device("cuda" if torch.cuda.is_available() else "cpu")
        self.model = self._load_model(model_path)
        self.model.eval()

    def _extract_state_dict(self, ckpt):
        if isinstance(ckpt, dict):
            if "model_state_dict" in ckpt:
                sd = ckpt["model_state_dict"]
            elif "state_dict" in ckpt:
                sd = ckpt["state_dict"]
            else:
                sd = ckpt
        else:
            sd = ckpt

        # strip DataParallel prefix
        if isinstance(sd, dict) and any(k.startswith("module.") for k in sd.keys()):
            sd = {k.replace("module.", "", 1): v for k, v in sd.items()}

        return sd

    def _load_model(self, model_path: str):
        model = models.mobilenet_v3_small(weights=None)
        model.classifier[-1] = nn.Linear(model.classifier[-1].in_features, len(CLASSES))

        ckpt = torch.load(model_path, map_location="cpu")
        sd = self._extract_state_dict(ckpt)
        model.load_state_dict(sd, strict=True)

        model = model.float().to(self.device)
        return model

    @torch.no_grad()
    def predict(self, tensor: torch.Tensor) -> np.ndarray:
        x = tensor.to(self.device, dtype=torch.float32, non_blocking=True)
        logits = self.model(x)
        probs = torch.softmax(logits, dim=1)[0]
        return probs.detach().cpu().numpy().astype(np.float32)

    def classify(self, frame_bgr):
        """frame_bgr -> ranked [(label, confidence), ...]; empty for an empty frame."""
        if frame_bgr is None or frame_bgr.size == 0:
            return []
        probs = self.predict(preprocess_bgr(frame_bgr))
        return rank_candidates(probs, CLASSES, self.top_k)
