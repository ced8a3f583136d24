import os
import re

import PyPDF2
import docx

from controllers.config import logger
from controllers.errors import EmptyOrUnreadableDocument, UnsupportedFileType


MIN_TEXT_LENGTH = 10


def file_type_from_name(file_name: str) -> str:
    """Lower-cased extension without the dot ("" when there is none)."""
    return os.path.splitext(file_name)[1].lstrip(".").lower()


class DocumentProcessor:
    """Service for extracting plain text from uploaded PDF and DOCX files"""

    def __init__(self):
        self.supported_types = {
            "pdf": self._extract_pdf_text,
            "docx": self._extract_docx_text,
        }

    def extract_text(self, file_path: str, file_type: str) -> str:
        """
        Extract text content from a document on disk

        Args:
            file_path: Path to the scratch copy of the upload
            file_type: Lower-cased file extension ("pdf", "docx")

        Returns:
            Extracted plain text
        """
        extractor = self.supported_types.get(file_type)
        if extractor is None:
            raise UnsupportedFileType(file_type)

        logger.info(f"Extracting {file_type.upper()} text from {file_path}")
        text = extractor(file_path)
        logger.info(f"Extracted {len(text)} characters from {file_path}")
        return text

    def _extract_pdf_text(self, file_path: str) -> str:
        """Extract text from PDF files, one page at a time"""
        try:
            with open(file_path, "rb") as f:
                pdf_reader = PyPDF2.PdfReader(f)
                pages = [page.extract_text() or "" for page in pdf_reader.pages]
        except Exception as e:
            logger.error(f"Error extracting PDF text: {str(e)}")
            raise EmptyOrUnreadableDocument(f"Failed to read PDF file: {str(e)}")

        return re.sub(r"\s+", " ", " ".join(pages)).strip()

    def _extract_docx_text(self, file_path: str) -> str:
        """Extract raw text from DOCX files, formatting discarded"""
        # Decoder warnings reach the log through logging.captureWarnings (see config)
        try:
            doc = docx.Document(file_path)

            text = ""
            for paragraph in doc.paragraphs:
                text += paragraph.text + "\n"

            # Also extract text from tables
            for table in doc.tables:
                for row in table.rows:
                    for cell in row.cells:
                        text += cell.text + "\t"
                    text += "\n"
        except Exception as e:
            logger.error(f"Error extracting DOCX text: {str(e)}")
            raise EmptyOrUnreadableDocument(f"Failed to read DOCX file: {str(e)}")

        return text.strip()


def check_extracted_text(text: str) -> str:
    """Reject documents whose extracted text is too short to grade."""
    stripped = (text or "").strip()
    if len(stripped) < MIN_TEXT_LENGTH:
        raise EmptyOrUnreadableDocument(
            f"Extracted text is too short ({len(stripped)} characters); "
            "the document is empty or unreadable"
        )
    return stripped
