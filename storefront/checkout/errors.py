"""
Résultats du checkout: une valeur OU une erreur typée, jamais d'exception métier.
- CheckoutErrorKind: VALIDATION, OUT_OF_STOCK, GATEWAY_FAILURE
- CheckoutState: étapes d'une tentative de checkout (journalisées par le service)
- CheckoutResult: conteneur propagé de composant en composant
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")

# module storefront.checkout.errors
class CheckoutErrorKind(str, Enum):
    VALIDATION = "validation"
    OUT_OF_STOCK = "out_of_stock"
    GATEWAY_FAILURE = "gateway_failure"


class CheckoutState(str, Enum):
    INITIATED = "INITIATED"
    VALIDATED = "VALIDATED"
    PRICED = "PRICED"
    SESSION_CREATED = "SESSION_CREATED"
    SETTLED = "SETTLED"
    REJECTED_OUT_OF_STOCK = "REJECTED_OUT_OF_STOCK"
    GATEWAY_FAILED = "GATEWAY_FAILED"


@dataclass(frozen=True)
class CheckoutError:
    kind: CheckoutErrorKind
    message: str
    product_id: Optional[str] = None
    detail: Any = None

    @property
    def status_code(self) -> int:
        """400 pour les erreurs client (panier/stock), 500 pour le prestataire de paiement."""
        return 500 if self.kind is CheckoutErrorKind.GATEWAY_FAILURE else 400

    def to_response(self) -> Dict[str, Any]:
        """
        Corps JSON renvoyé au client:
        - VALIDATION: {"error": {champ: [messages]}}
        - OUT_OF_STOCK: {"error": "Produit X en rupture de stock"}
        - GATEWAY_FAILURE: {"error": <erreur sérialisée>}
        """
        if self.kind is CheckoutErrorKind.OUT_OF_STOCK:
            return {"error": self.message}
        return {"error": self.detail if self.detail is not None else self.message}


def validation_error(field_errors: Dict[str, List[str]]) -> CheckoutError:
    return CheckoutError(CheckoutErrorKind.VALIDATION, "Panier invalide", detail=field_errors)

def out_of_stock(product_id: str) -> CheckoutError:
    return CheckoutError(
        CheckoutErrorKind.OUT_OF_STOCK,
        f"Produit {product_id} en rupture de stock",
        product_id=product_id,
    )

def gateway_failure(detail: Dict[str, Any]) -> CheckoutError:
    return CheckoutError(CheckoutErrorKind.GATEWAY_FAILURE, "Erreur du prestataire de paiement", detail=detail)


@dataclass(frozen=True)
class CheckoutResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[CheckoutError] = None
    state: Optional[CheckoutState] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T, state: Optional[CheckoutState] = None) -> "CheckoutResult[T]":
        return cls(value=value, state=state)

    @classmethod
    def failure(cls, error: CheckoutError, state: Optional[CheckoutState] = None) -> "CheckoutResult[T]":
        return cls(error=error, state=state)
