"""
Overpass response parser

Picks the JSON or XML decoder for a response and returns the linked Result
"""

import re
from loguru import logger

from .json_parser import JsonResponseParser
from .models import Result
from .xml_parser import XmlResponseParser

# [out:json], [out:xml], [ out : csv(...) ] ... anywhere in the query
OUTPUT_DIRECTIVE = re.compile(r"\[\s*out\s*:\s*(\w+)")


def detect_output_format(query: str) -> str:
    """
    Guess the response encoding from the query's [out:<format>] setting

    A plain text match: only the literal format "json" selects JSON,
    anything else, or no directive at all, means the server default (XML).
    """
    match = OUTPUT_DIRECTIVE.search(query or "")
    if match and match.group(1) == "json":
        return "json"
    return "xml"


class OverpassResponseParser:
    """Decodes raw Overpass responses"""

    @staticmethod
    def parse(body: bytes, output_format: str = "xml") -> Result:
        """
        Decode a response body with the decoder for output_format

        Args:
            body: Raw response bytes
            output_format: "json" or "xml"

        Returns:
            Result owned by the caller

        Raises:
            DecodeError: If the body cannot be decoded
        """
        logger.debug(f"Decoding {len(body)} byte {output_format} response")
        if output_format == "json":
            result = JsonResponseParser.parse(body)
        else:
            result = XmlResponseParser.parse(body)

        # Runtime errors such as timeouts come back as a remark next to partial data
        if result.remark:
            logger.warning(f"Overpass remark: {result.remark}")
        return result


def decode(body: bytes, query: str = "") -> Result:
    """Decode a response body that was produced by query, without any network access"""
    return OverpassResponseParser.parse(body, detect_output_format(query))
