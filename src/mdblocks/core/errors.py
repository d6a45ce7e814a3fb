"""Exception types raised by stores and the write pipeline"""


class MdBlocksError(Exception):
    """Base class for all mdblocks errors."""


class StoreError(MdBlocksError):
    """A content store operation failed."""


class DocumentNotFoundError(StoreError, LookupError):
    def __init__(self, doc_id: str):
        super().__init__(f"Document {doc_id} not found")
        self.doc_id = doc_id


class BlockNotFoundError(StoreError, LookupError):
    def __init__(self, doc_id: str, block_id: str):
        super().__init__(f"Block {block_id} not found in document {doc_id}")
        self.doc_id = doc_id
        self.block_id = block_id


class UnsupportedBlockError(MdBlocksError, ValueError):
    """A native block type has no counterpart in the block model."""


class ContentLossError(MdBlocksError):
    """Blocks were deleted but the replacement content could not be appended.

    compensated is True when the original blocks were re-appended, so the
    document holds its previous content (under new identities).
    """

    def __init__(self, doc_id: str, compensated: bool, deleted: int):
        state = "original content restored" if compensated else "original content LOST"
        super().__init__(f"Update of document {doc_id} failed after deleting {deleted} block(s); {state}")
        self.doc_id = doc_id
        self.compensated = compensated
        self.deleted = deleted
