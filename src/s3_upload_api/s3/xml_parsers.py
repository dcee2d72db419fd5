"""
Reading and writing the S3 XML documents used by multipart uploads.

Responses from real servers carry the
``http://s3.amazonaws.com/doc/2006-03-01/`` namespace while many compatible
servers omit it, so lookups here match on the local tag name only.
"""

import logging
from dataclasses import dataclass
from xml.etree import ElementTree as ET

from s3_upload_api.errors import ProtocolError, ServerError
from s3_upload_api.s3.transport import Response

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def _parse(body: bytes) -> ET.Element:
    try:
        return ET.fromstring(body)
    except ET.ParseError as e:
        raise ProtocolError(f"malformed XML in response: {e}") from e


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if _local_name(child.tag) == name]


def findtext(element: ET.Element, name: str) -> str | None:
    for child in _children(element, name):
        return child.text or ""
    return None


def parse_error(response: Response) -> ServerError:
    """Turn a non-success response into a ServerError."""
    status = response.status_code
    if not response.body:
        return ServerError(status_code=status)
    try:
        root = ET.fromstring(response.body)
    except ET.ParseError:
        logger.debug(f"Non-XML error body for HTTP {status}: {response.body[:200]!r}")
        return ServerError(status_code=status, message=response.body.decode("utf-8", "replace"))
    return ServerError(
        status_code=status,
        code=findtext(root, "Code"),
        message=findtext(root, "Message"),
        request_id=findtext(root, "RequestId"),
        host_id=findtext(root, "HostId"),
        resource=findtext(root, "Resource"),
        bucket=findtext(root, "BucketName"),
        key=findtext(root, "Key"),
    )


def parse_upload_id(body: bytes) -> str:
    root = _parse(body)
    upload_id = findtext(root, "UploadId")
    if not upload_id:
        raise ProtocolError("unable to get upload id")
    return upload_id


@dataclass
class ListedPart:
    part_number: int
    etag: str
    size: int


@dataclass
class ListPartsPage:
    parts: list[ListedPart]
    is_truncated: bool
    next_part_number_marker: str | None


def parse_list_parts(body: bytes) -> ListPartsPage:
    root = _parse(body)
    parts: list[ListedPart] = []
    for element in _children(root, "Part"):
        part_number = findtext(element, "PartNumber")
        etag = findtext(element, "ETag")
        size = findtext(element, "Size")
        if part_number is None or etag is None:
            raise ProtocolError("ListParts entry without PartNumber or ETag")
        parts.append(
            ListedPart(
                part_number=int(part_number), etag=etag, size=int(size or 0)
            )
        )
    is_truncated = (findtext(root, "IsTruncated") or "").lower() == "true"
    return ListPartsPage(
        parts=parts,
        is_truncated=is_truncated,
        next_part_number_marker=findtext(root, "NextPartNumberMarker"),
    )


def build_complete_document(parts: list[tuple[int, str]]) -> bytes:
    """Serialize (part number, etag) pairs in the order given."""
    root = ET.Element("CompleteMultipartUpload")
    for part_number, etag in parts:
        part = ET.SubElement(root, "Part")
        ET.SubElement(part, "PartNumber").text = str(part_number)
        ET.SubElement(part, "ETag").text = etag
    return ET.tostring(root, encoding="utf-8", xml_declaration=False)
