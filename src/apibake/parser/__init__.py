from apibake.parser.openapi import OpenApiParser

__all__ = ["OpenApiParser"]
