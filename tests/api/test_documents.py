"""
Tests for the pipeline control route.
"""

from uuid import uuid4

from salesdesk.core.document_processing.models.stage_message import PipelineStage, StageMessage
from salesdesk.core.exceptions import DispatchError, DocumentNotFoundError


def test_reprocess_accepted(client, mock_document_service):
    document_id = uuid4()
    mock_document_service.reprocess.return_value = StageMessage(
        document_id=document_id,
        stage=PipelineStage.EXTRACTION,
        bucket="bucket",
        storage_path="jane/1_catalog.txt",
        media_type="text/plain",
        force=True,
    )

    response = client.post(
        f"/api/v1/documents/{document_id}/reprocess",
        json={"stage": "extraction", "force": True},
    )

    assert response.status_code == 202
    assert response.json() == {"document_id": str(document_id), "stage": "extraction", "dispatched": True}
    mock_document_service.reprocess.assert_awaited_once_with(document_id, PipelineStage.EXTRACTION, force=True)


def test_reprocess_defaults_to_analysis(client, mock_document_service):
    document_id = uuid4()
    mock_document_service.reprocess.return_value = StageMessage(
        document_id=document_id,
        stage=PipelineStage.ANALYSIS,
        bucket="bucket",
        storage_path=None,
        media_type="text/plain",
    )

    response = client.post(f"/api/v1/documents/{document_id}/reprocess", json={})

    assert response.status_code == 202
    mock_document_service.reprocess.assert_awaited_once_with(document_id, PipelineStage.ANALYSIS, force=False)


def test_reprocess_unknown_document(client, mock_document_service):
    document_id = uuid4()
    mock_document_service.reprocess.side_effect = DocumentNotFoundError(document_id)

    response = client.post(f"/api/v1/documents/{document_id}/reprocess", json={})

    assert response.status_code == 404


def test_reprocess_broker_unavailable(client, mock_document_service):
    mock_document_service.reprocess.side_effect = DispatchError("Broker unreachable", stage="analysis")

    response = client.post(f"/api/v1/documents/{uuid4()}/reprocess", json={})

    assert response.status_code == 503
