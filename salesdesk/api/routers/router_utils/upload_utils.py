"""
Upload request helpers.

Dependencies: salesdesk.application.services, salesdesk.models
System role: Request body to service input conversion
"""

from salesdesk.application.services.document_service import IncomingFile
from salesdesk.models.document import UploadDocumentsRequest


def to_incoming_files(request: UploadDocumentsRequest) -> list[IncomingFile]:
    """
    Decode request files into service inputs.

    Raises:
        ValidationError: When a file's base64 content is invalid
    """
    files = []
    for item in request.files:
        data = item.decoded_content()
        files.append(
            IncomingFile(
                name=item.name,
                media_type=item.media_type,
                data=data,
                size_bytes=item.size_bytes if item.size_bytes is not None else len(data),
            )
        )
    return files
