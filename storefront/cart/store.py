"""
Conteneur d'état du panier (pur: pas de Redis, pas de Stripe, pas de DB).

Une ligne de panier est un dict:
    {"id", "name", "price", "image", "quantity", "selectedVariants"?}
Invariants:
- quantity >= 1 pour toute ligne conservée (une mise à jour < 1 supprime la ligne);
- une seule ligne par (id produit, sélection de variantes);
- total et item_count sont recalculés à chaque lecture depuis les lignes.
"""
from typing import Any, Dict, Iterable, List, Optional, Tuple


def _variants_key(variants: Optional[Dict[str, Any]]) -> Tuple[Tuple[str, str], ...]:
    return tuple(sorted((str(k), str(v)) for k, v in (variants or {}).items()))


def line_key(item_id: Any, variants: Optional[Dict[str, Any]] = None) -> Tuple[str, Tuple[Tuple[str, str], ...]]:
    """Identité d'une ligne: id produit + sélection de variantes (ordre des clés indifférent)."""
    return str(item_id), _variants_key(variants)


def _to_price(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _to_quantity(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class CartStore:
    """
    Panier d'une session de navigation.
    - add_item / update_quantity / remove_item / clear_cart: seules opérations de mutation.
    - total / item_count: dérivés, jamais stockés.
    """

    def __init__(self, items: Optional[Iterable[Dict[str, Any]]] = None):
        self._lines: List[Dict[str, Any]] = []
        for item in items or []:
            self.add_item(item, _to_quantity(item.get("quantity")))

    def _find(self, item_id: Any, variants: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        key = line_key(item_id, variants)
        for line in self._lines:
            if line_key(line["id"], line.get("selectedVariants")) == key:
                return line
        return None

    def _matching(self, item_id: Any, variants: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
        # Sans sélection explicite, l'opération vise toutes les lignes du produit
        if variants is None:
            return [line for line in self._lines if line["id"] == str(item_id)]
        line = self._find(item_id, variants)
        return [line] if line else []

    def add_item(self, item: Dict[str, Any], quantity: int = 1) -> None:
        """
        Ajoute `quantity` unités d'un produit.
        - Ligne existante (même id + variantes): la quantité est cumulée.
        - Sinon: nouvelle ligne en fin de panier.
        - quantity < 1 ou id vide: aucun effet.
        """
        quantity = _to_quantity(quantity)
        item_id = str(item.get("id") or "").strip()
        if quantity < 1 or not item_id:
            return
        variants = item.get("selectedVariants") or None
        existing = self._find(item_id, variants)
        if existing:
            existing["quantity"] += quantity
            return
        line: Dict[str, Any] = {
            "id": item_id,
            "name": item.get("name") or "",
            "price": _to_price(item.get("price")),
            "image": item.get("image") or "",
            "quantity": quantity,
        }
        if variants:
            line["selectedVariants"] = {str(k): str(v) for k, v in variants.items()}
        self._lines.append(line)

    def update_quantity(self, item_id: Any, quantity: int, selected_variants: Optional[Dict[str, Any]] = None) -> None:
        """Fixe la quantité; en dessous de 1 la ligne est supprimée."""
        quantity = _to_quantity(quantity)
        if quantity < 1:
            self.remove_item(item_id, selected_variants)
            return
        for line in self._matching(item_id, selected_variants):
            line["quantity"] = quantity

    def remove_item(self, item_id: Any, selected_variants: Optional[Dict[str, Any]] = None) -> None:
        """Supprime la ligne; sans erreur si elle est absente."""
        doomed = {id(line) for line in self._matching(item_id, selected_variants)}
        self._lines = [line for line in self._lines if id(line) not in doomed]

    def clear_cart(self) -> None:
        self._lines = []

    @property
    def items(self) -> List[Dict[str, Any]]:
        """Copie des lignes (les mutations passent par les opérations ci-dessus)."""
        copies = []
        for line in self._lines:
            copy = dict(line)
            if "selectedVariants" in copy:
                copy["selectedVariants"] = dict(copy["selectedVariants"])
            copies.append(copy)
        return copies

    @property
    def total(self) -> float:
        return round(sum(line["price"] * line["quantity"] for line in self._lines), 2)

    @property
    def item_count(self) -> int:
        return sum(line["quantity"] for line in self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def to_dict(self) -> Dict[str, Any]:
        return {"items": self.items, "total": self.total, "itemCount": self.item_count}
