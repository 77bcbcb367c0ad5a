from typing import Dict, List
from pydantic import ValidationError

def field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """
    Aplatit une ValidationError pydantic en {champ: [messages]}.
    - Le champ est le chemin pointé (ex: "products.0.quantity").
    - Les erreurs sur l'objet entier sont rangées sous "body".
    """
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        key = ".".join(str(part) for part in err.get("loc") or ()) or "body"
        errors.setdefault(key, []).append(err.get("msg") or "invalide")
    return errors
