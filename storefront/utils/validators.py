from typing import Any, Dict, Mapping, Type, TypeVar
from fastapi import Request
from pydantic import BaseModel, ValidationError as PydanticValidationError

from storefront.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

async def read_json_object(request: Request) -> Dict[str, Any]:
    """
    Lit le body JSON d'une requête et exige un objet.
    - Body vide, JSON invalide ou non-objet: ValidationError (400).
    """
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Invalid JSON body")
    if not isinstance(body, dict):
        raise ValidationError("JSON body must be an object")
    return body

def validate_payload(model: Type[ModelT], data: Dict[str, Any], messages: Mapping[str, str]) -> ModelT:
    """
    Valide `data` avec un modèle pydantic et traduit la première erreur en ValidationError (400).
    - messages: {"<champ>": "message"}; "<champ>[]" cible une erreur sur un élément d'une liste.
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        errors = e.errors()
        loc = errors[0]["loc"] if errors else ()
        field = str(loc[0]) if loc else ""
        message = messages.get(f"{field}[]") if len(loc) > 1 else None
        raise ValidationError(message or messages.get(field) or "Invalid request body")
