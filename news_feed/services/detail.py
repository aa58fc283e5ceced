"""Single document view."""

from typing import Optional

from news_feed.exceptions import DocumentNotFound
from news_feed.models.schemas import DetailRecord, Document
from news_feed.services.assets import AssetURLResolver
from news_feed.services.protocols import QueryClient
from news_feed.services.queries import document_by_id_query
from news_feed.services.references import ReferenceResolver
from news_feed.services.render import build_detail_record
from news_feed.services.state import Loaded, View


class DetailView(View):
    """Loads one document by id, with the same last-issued-wins rule as feeds."""

    def __init__(
        self,
        client: QueryClient,
        assets: AssetURLResolver,
        document_type: str = "news",
        references: Optional[ReferenceResolver] = None,
    ):
        super().__init__()
        self.client = client
        self.assets = assets
        self.document_type = document_type
        self.references = references or ReferenceResolver()
        self.document_id: Optional[str] = None

    async def load(self, document_id: str) -> Optional[Document]:
        """Fetch a document by id.

        A missing document ends in Failed(DocumentNotFound); only
        cancellation propagates.

        Returns:
            The document if this load's result was applied, None otherwise
        """
        self.document_id = document_id
        expression, params = document_by_id_query(self.document_type, document_id, self.references)

        async def fetch_one():
            documents = await self.client.fetch(expression, params, bypass_cache=True)
            if not documents:
                raise DocumentNotFound(f"No {self.document_type} document with id {document_id!r}")
            return documents[:1]

        applied = await self._run(fetch_one)
        return applied[0] if applied else None

    @property
    def document(self) -> Optional[Document]:
        if not isinstance(self.state, Loaded):
            return None
        return self.state.documents[0]

    @property
    def record(self) -> Optional[DetailRecord]:
        document = self.document
        if document is None:
            return None
        return build_detail_record(document, self.assets)
