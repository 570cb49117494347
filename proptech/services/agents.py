from typing import List, Optional

from proptech.schemas.people import Agent
from proptech.services.base import ResourceService

class AgentService(ResourceService[Agent]):
    path = "/api/agents"
    model = Agent
    singular = "agente"
    plural = "agentes"

    async def get_by_email(self, email: str) -> Optional[Agent]:
        wanted = (email or "").strip().lower()
        if not wanted:
            return None
        for agent in await self.get_all():
            if agent.email.lower() == wanted:
                return agent
        return None

    async def search(self, term: str) -> List[Agent]:
        term = (term or "").strip().lower()
        agents = await self.get_all()
        if not term:
            return agents
        return [
            a for a in agents
            if term in a.full_name.lower()
            or term in a.email.lower()
            or term in (a.phone or "")
            or term in (a.position or "").lower()
            or term in (a.agency_name or "").lower()
        ]
