"""Collection membership editing.

The admin edits a collection's products as a set of checkboxes. Saving diffs
the selection against the membership currently stored by the API and issues
one remove call per dropped product and one add call per new product.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from .api_client import ApiError, StoreApiClient

__all__ = ["SyncResult", "diff_membership", "sync_collection_products"]

logger = logging.getLogger(__name__)


def _unique(ids: Iterable[int]) -> List[int]:
    return list(dict.fromkeys(ids))


def diff_membership(
    original_ids: Iterable[int], selected_ids: Iterable[int]
) -> Tuple[List[int], List[int]]:
    """Compute the requests needed to go from ``original_ids`` to ``selected_ids``.

    Returns:
        (to_add, to_remove): ids to add in selection order, ids to remove in
        original order. Duplicates are ignored.
    """
    original = _unique(original_ids)
    selected = _unique(selected_ids)
    original_set = set(original)
    selected_set = set(selected)
    to_add = [pid for pid in selected if pid not in original_set]
    to_remove = [pid for pid in original if pid not in selected_set]
    return to_add, to_remove


@dataclass
class SyncResult:
    added: List[int] = field(default_factory=list)
    removed: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def sync_collection_products(
    client: StoreApiClient, collection_id: int, selected_ids: Iterable[int]
) -> SyncResult:
    """Make the API's membership for a collection match ``selected_ids``.

    Membership is re-read from the API first so the diff is against what is
    stored now, not what the form was rendered with. Removals go first. A
    failed call is recorded and the remaining calls still run.

    Raises:
        ApiError: if the current membership cannot be fetched.
    """
    current = client.get_collection(collection_id)
    to_add, to_remove = diff_membership(current.product_ids, selected_ids)
    result = SyncResult()

    for product_id in to_remove:
        try:
            client.remove_product_from_collection(collection_id, product_id)
            result.removed.append(product_id)
        except ApiError as e:
            logger.error(f"Failed to remove product {product_id} from collection {collection_id}: {e}")
            result.failed.append(product_id)

    for product_id in to_add:
        try:
            client.add_product_to_collection(collection_id, product_id)
            result.added.append(product_id)
        except ApiError as e:
            logger.error(f"Failed to add product {product_id} to collection {collection_id}: {e}")
            result.failed.append(product_id)

    logger.info(
        f"Collection {collection_id}: added {len(result.added)}, "
        f"removed {len(result.removed)}, failed {len(result.failed)}"
    )
    return result
