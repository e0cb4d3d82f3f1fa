from apibake.pdf.writer import PdfWriter

__all__ = ["PdfWriter"]
