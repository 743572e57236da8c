"""
Resume text extraction.

Dependencies: langchain_community, pypdf
System role: PDF to plain text conversion for the analysis pipeline
"""

from .pdf_extractor import PDFExtractor

__all__ = ["PDFExtractor"]
