"""
Tests for the Sales AI routes.

System role: Verification of request validation, service calls and error mapping
"""

import base64
from uuid import uuid4

from salesdesk.boundary.db.models.document_model import DocumentContext, DocumentStatus
from salesdesk.core.exceptions import (
    DocumentNotFoundError,
    GenerationError,
    ModelOutputError,
    PermissionDeniedError,
    ValidationError,
)
from salesdesk.core.retrieval.retrieval_engine import SearchStrategy
from salesdesk.models.search import (
    CompareProduct,
    CompareQuestion,
    ProductResult,
    Recommendation,
    SearchResponse,
)
from tests.api.helpers import make_document, make_entity


class TestUploadCatalogDocuments:
    def test_upload_returns_created_documents(self, client, mock_document_service):
        # Arrange
        document = make_document()
        mock_document_service.upload.return_value = [document]
        encoded = base64.b64encode(b"%PDF-1.4 catalog").decode("ascii")

        # Act
        response = client.post(
            "/api/v1/sales-ai/documents",
            json={
                "uploaded_by": "jane@example.com",
                "files": [
                    {"name": "catalog.pdf", "media_type": "application/pdf", "content": f"data:application/pdf;base64,{encoded}"}
                ],
            },
        )

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["total"] == 1
        assert data["documents"][0]["id"] == str(document.id)
        assert data["documents"][0]["status"] == "uploaded"
        kwargs = mock_document_service.upload.await_args.kwargs
        assert kwargs["context"] is DocumentContext.SALES_AI
        assert kwargs["files"][0].data == b"%PDF-1.4 catalog"
        assert kwargs["files"][0].size_bytes == len(b"%PDF-1.4 catalog")

    def test_plain_text_content(self, client, mock_document_service):
        mock_document_service.upload.return_value = [make_document()]

        client.post(
            "/api/v1/sales-ai/documents",
            json={
                "uploaded_by": "jane@example.com",
                "files": [{"name": "catalog.txt", "media_type": "text/plain", "content": "Phone X1 $499"}],
            },
        )

        assert mock_document_service.upload.await_args.kwargs["files"][0].data == b"Phone X1 $499"

    def test_invalid_base64_is_rejected(self, client, mock_document_service):
        response = client.post(
            "/api/v1/sales-ai/documents",
            json={
                "uploaded_by": "jane@example.com",
                "files": [{"name": "a.pdf", "media_type": "application/pdf", "content": "data:application/pdf;base64,@@@"}],
            },
        )

        assert response.status_code == 400
        mock_document_service.upload.assert_not_awaited()

    def test_empty_file_list_fails_validation(self, client):
        response = client.post(
            "/api/v1/sales-ai/documents",
            json={"uploaded_by": "jane@example.com", "files": []},
        )

        assert response.status_code == 422

    def test_service_validation_error_maps_to_400(self, client, mock_document_service):
        mock_document_service.upload.side_effect = ValidationError("Uploader is required", field="uploaded_by")

        response = client.post(
            "/api/v1/sales-ai/documents",
            json={
                "uploaded_by": " ",
                "files": [{"name": "catalog.txt", "media_type": "text/plain", "content": "x"}],
            },
        )

        assert response.status_code == 400


class TestCatalogDocuments:
    def test_list_searchable(self, client, mock_document_service):
        documents = [make_document(status=DocumentStatus.ANALYSIS_COMPLETE_ALL) for _ in range(2)]
        mock_document_service.list_searchable.return_value = documents

        response = client.get("/api/v1/sales-ai/documents?limit=10")

        assert response.status_code == 200
        assert response.json()["total"] == 2
        mock_document_service.list_searchable.assert_awaited_once_with(DocumentContext.SALES_AI, limit=10)

    def test_detail_includes_products(self, client, mock_document_service):
        document = make_document(status=DocumentStatus.ANALYSIS_COMPLETE_ALL)
        mock_document_service.get_with_entities.return_value = (document, [make_entity()])

        response = client.get(f"/api/v1/sales-ai/documents/{document.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "analysis_complete_all_products"
        assert data["entities"][0]["name"] == "Phone X1"
        assert data["entities"][0]["status"] == "analysis_complete"

    def test_detail_not_found(self, client, mock_document_service):
        document_id = uuid4()
        mock_document_service.get_with_entities.side_effect = DocumentNotFoundError(document_id)

        response = client.get(f"/api/v1/sales-ai/documents/{document_id}")

        assert response.status_code == 404

    def test_delete(self, client, mock_document_service):
        document_id = uuid4()

        response = client.delete(f"/api/v1/sales-ai/documents/{document_id}?requested_by=jane@example.com")

        assert response.status_code == 204
        mock_document_service.delete.assert_awaited_once_with(document_id, "jane@example.com")

    def test_delete_by_other_user_is_forbidden(self, client, mock_document_service):
        mock_document_service.delete.side_effect = PermissionDeniedError("Only the uploader can delete this document")

        response = client.delete(f"/api/v1/sales-ai/documents/{uuid4()}?requested_by=bob@example.com")

        assert response.status_code == 403

    def test_delete_requires_requester(self, client):
        response = client.delete(f"/api/v1/sales-ai/documents/{uuid4()}")

        assert response.status_code == 422


class TestSearchProducts:
    def test_search(self, client, mock_search_service):
        # Arrange
        document_id = uuid4()
        mock_search_service.search.return_value = SearchResponse(
            results=[ProductResult(name="Phone X1", price="$499", similarity=0.91)],
            strategy=SearchStrategy.VECTOR,
        )

        # Act
        response = client.post(
            "/api/v1/sales-ai/search",
            json={"query": "phones under 500", "document_id": str(document_id), "match_count": 3},
        )

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["strategy"] == "vector"
        assert data["results"][0]["name"] == "Phone X1"
        mock_search_service.search.assert_awaited_once_with(
            query="phones under 500", document_id=document_id, match_count=3
        )

    def test_unknown_document(self, client, mock_search_service):
        mock_search_service.search.side_effect = DocumentNotFoundError(uuid4())

        response = client.post("/api/v1/sales-ai/search", json={"query": "phones", "document_id": str(uuid4())})

        assert response.status_code == 404

    def test_empty_query_fails_validation(self, client):
        response = client.post("/api/v1/sales-ai/search", json={"query": ""})

        assert response.status_code == 422


PRODUCTS = [
    {"id": "p1", "name": "Phone X1", "price": "$499"},
    {"id": "p2", "name": "Phone Y2", "price": "$399"},
]


class TestAnalyzeProducts:
    def test_questions_without_answers(self, client, mock_search_service):
        # Arrange
        mock_search_service.compare_questions.return_value = [
            CompareQuestion(id="q1", text="What matters most?", options=["Camera", "Battery"])
        ]

        # Act
        response = client.post("/api/v1/sales-ai/search/analyze", json={"products": PRODUCTS})

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["questions"][0]["options"] == ["Camera", "Battery"]
        assert data["recommendation"] is None
        products = mock_search_service.compare_questions.await_args.args[0]
        assert products == [CompareProduct(**product) for product in PRODUCTS]
        mock_search_service.recommend.assert_not_awaited()

    def test_recommendation_with_answers(self, client, mock_search_service):
        # Arrange
        mock_search_service.recommend.return_value = Recommendation(
            recommended_product_id="p2", explanation="Best battery for the price."
        )

        # Act
        response = client.post(
            "/api/v1/sales-ai/search/analyze",
            json={"products": PRODUCTS, "answers": {"q1": "Battery"}},
        )

        # Assert
        assert response.status_code == 200
        assert response.json()["recommendation"] == {
            "recommended_product_id": "p2",
            "explanation": "Best battery for the price.",
        }
        products, answers = mock_search_service.recommend.await_args.args
        assert [product.id for product in products] == ["p1", "p2"]
        assert answers == {"q1": "Battery"}

    def test_empty_product_list_fails_validation(self, client):
        response = client.post("/api/v1/sales-ai/search/analyze", json={"products": []})

        assert response.status_code == 422

    def test_empty_answers_map_to_400(self, client, mock_search_service):
        mock_search_service.recommend.side_effect = ValidationError("At least one answer is required", field="answers")

        response = client.post("/api/v1/sales-ai/search/analyze", json={"products": PRODUCTS, "answers": {}})

        assert response.status_code == 400

    def test_unusable_model_output_maps_to_502(self, client, mock_search_service):
        mock_search_service.compare_questions.side_effect = ModelOutputError("Model returned empty output")

        response = client.post("/api/v1/sales-ai/search/analyze", json={"products": PRODUCTS})

        assert response.status_code == 502
        assert response.json()["detail"] == "Model returned empty output"

    def test_model_failure_maps_to_502(self, client, mock_search_service):
        mock_search_service.recommend.side_effect = GenerationError("Generative model call failed: 503")

        response = client.post(
            "/api/v1/sales-ai/search/analyze",
            json={"products": PRODUCTS, "answers": {"q1": "Camera"}},
        )

        assert response.status_code == 502
