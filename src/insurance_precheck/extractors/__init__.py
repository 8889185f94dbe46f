"""
OCR engines.
"""

from .ocr_extractor import OCREngine, TesseractOCREngine, create_ocr_engine
