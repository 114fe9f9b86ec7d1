"""Custom exception classes"""


class FaceShapeException(Exception):
    """Base exception"""
    pass


class InvalidLandmarksError(FaceShapeException):
    """Landmark set does not follow the 68-point contract"""
    pass


class InvalidFeatureVectorError(FaceShapeException):
    """Feature vector length or values do not match the dataset"""
    pass


class InsufficientDataError(FaceShapeException):
    """Reference dataset is empty"""
    pass


class ConfigurationError(FaceShapeException):
    """Configuration or profile file error"""
    pass


class InvalidImageError(FaceShapeException):
    """Invalid image input"""
    pass


class DetectionError(FaceShapeException):
    """Face detection failed"""
    pass


class NoFaceDetectedError(DetectionError):
    """No face found in the image"""
    pass


class MultipleFacesError(DetectionError):
    """More than one face found in the image"""

    def __init__(self, face_count: int):
        super().__init__(f"Expected a single face, detected {face_count}")
        self.face_count = face_count
