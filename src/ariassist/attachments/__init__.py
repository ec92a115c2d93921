"""Attachment import: plain text and PDF files."""

from .extract import AttachmentError, extract_text

__all__ = ["AttachmentError", "extract_text"]
