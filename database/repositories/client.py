"""Client repository for database operations."""
from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Client


class ClientRepository:
    """Repository for Client model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, client_id: int) -> Optional[Client]:
        """Get client by ID."""
        result = await self.session.execute(
            select(Client).where(Client.id == client_id)
        )
        return result.scalar_one_or_none()

    async def get_by_phone(self, phone: str) -> List[Client]:
        """Get clients sharing a phone number."""
        result = await self.session.execute(
            select(Client).where(Client.phone == phone).order_by(Client.id)
        )
        return list(result.scalars().all())

    async def create(
        self,
        name: str,
        phone: Optional[str] = None,
        consent_whatsapp: bool = False,
    ) -> Client:
        """Create new client."""
        client = Client(
            name=name,
            phone=phone,
            consent_whatsapp=consent_whatsapp,
        )

        self.session.add(client)
        await self.session.flush()
        return client

    async def update_contact(
        self,
        client_id: int,
        phone: Optional[str] = None,
        consent_whatsapp: Optional[bool] = None,
        clear_phone: bool = False,
    ) -> Optional[Client]:
        """Update phone and/or WhatsApp consent."""
        client = await self.get_by_id(client_id)
        if client:
            if clear_phone:
                client.phone = None
            elif phone is not None:
                client.phone = phone
            if consent_whatsapp is not None:
                client.consent_whatsapp = consent_whatsapp
            await self.session.flush()
        return client
