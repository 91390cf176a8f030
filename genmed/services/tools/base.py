# genmed/services/tools/base.py
from __future__ import annotations
import json
import logging
from typing import Any, ClassVar, Dict, Type

from pydantic import BaseModel, ValidationError

logger = logging.getLogger("genmed.agent")


def dumps(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, default=str)


class AgentTool:
    """
    One function the agent may call. Subclasses set name/description/Params and implement run().
    invoke() is the tool boundary: whatever happens, the model gets a JSON string back.
    """
    name: ClassVar[str]
    description: ClassVar[str]
    Params: ClassVar[Type[BaseModel]]

    async def run(self, params: BaseModel) -> Dict[str, Any]:
        raise NotImplementedError

    def definition(self) -> Dict[str, Any]:
        schema = self.Params.model_json_schema()
        schema.pop("title", None)
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": schema,
            },
        }

    async def invoke(self, arguments: str | None) -> str:
        try:
            params = self.Params.model_validate_json(arguments or "{}")
        except ValidationError as e:
            logger.warning("Tool %s got invalid arguments %r: %s", self.name, arguments, e)
            return dumps({"success": False, "error": f"Invalid arguments for {self.name}: {e.errors()[0].get('msg')}"})

        try:
            out = await self.run(params)
        except Exception as e:
            logger.exception("Tool %s crashed", self.name)
            return dumps({"success": False, "error": str(e) or e.__class__.__name__})
        return dumps(out)
