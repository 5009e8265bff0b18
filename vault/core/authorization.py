"""Request sanitizing ahead of the repositories.

Repositories write whatever a request allows. Ownership and group changes are
only allowed when the caller has authority for them, which is decided here
before the request reaches the data layer.
"""

from vault.core.logging import get_logger
from vault.schemas.account import AccountRequest

logger = get_logger(__name__)


def sanitize_account_request(
    request: AccountRequest,
    *,
    can_change_owner: bool,
    can_change_group: bool,
) -> AccountRequest:
    """Strip the ownership changes a caller is not allowed to make.

    Args:
        request: Incoming account request
        can_change_owner: Whether the caller may reassign the owner
        can_change_group: Whether the caller may reassign the owning group

    Returns:
        A copy of the request with unauthorized change flags cleared
    """
    change_owner = request.change_owner and can_change_owner
    change_user_group = request.change_user_group and can_change_group

    if change_owner != request.change_owner or change_user_group != request.change_user_group:
        logger.info(
            "account_request_restricted",
            account_id=request.id,
            owner_change_dropped=change_owner != request.change_owner,
            group_change_dropped=change_user_group != request.change_user_group,
        )

    return request.model_copy(
        update={"change_owner": change_owner, "change_user_group": change_user_group}
    )
