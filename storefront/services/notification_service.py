# storefront/services/notification_service.py
from typing import List

from storefront.data.gateway import DataGateway
from storefront.domain.schemas import NotificationOut
from storefront.repos.notification_repo import NotificationRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationReader:
    def __init__(self, gateway: DataGateway):
        self.repo = NotificationRepo(gateway)

    def list_notifications(self, user_id: str | None, from_: int = 0, to: int = 20) -> List[NotificationOut]:
        if not user_id:
            return []

        res = self.repo.list_for_user(user_id, from_, to)
        if not res.ok:
            logger.error(f"Nie udalo sie pobrac powiadomien {user_id}: {res.error.message}")
            return []

        return [NotificationOut.model_validate(n) for n in res.data]
