from uxaudit.vision.client_base import BaseVisionClient
from uxaudit.vision.detector import VisionDetector
from uxaudit.vision.factory import VisionDetectorFactory

__all__ = ["BaseVisionClient", "VisionDetector", "VisionDetectorFactory"]
