from .classify import Shape, classify
from .rebuild import Element, elements_of, rebuild, zip_elements

__all__ = (
    # Classifier
    "Shape",
    "classify",
    # Reconstruction
    "Element",
    "elements_of",
    "rebuild",
    "zip_elements",
)
