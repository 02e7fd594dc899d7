"""Random bot names without repeats."""

import random
from collections.abc import Iterable

BOT_NAMES = (
    "Giovanni", "Giuseppe", "Antonio", "Francesco", "Luigi", "Pietro", "Paolo", "Marco",
    "Matteo", "Carlo", "Domenico", "Vincenzo", "Salvatore", "Raffaele", "Rosario", "Pasquale",
    "Gennaro", "Umberto", "Aldo", "Enrico", "Ernesto", "Alberto", "Bruno", "Sergio", "Franco",
    "Mario", "Vittorio", "Ettore", "Tullio", "Italo", "Dino", "Silvio", "Giulio", "Cesare",
    "Lorenzo", "Ottavio", "Teodoro", "Eugenio", "Arturo", "Renato", "Adolfo", "Carmine",
    "Michele", "Angelo", "Gaetano", "Nicola", "Ferdinando", "Raimondo", "Riccardo", "Ruggero",
    "Corrado", "Marino", "Orlando", "Armando", "Albino", "Celestino", "Basilio", "Benedetto",
    "Clemente", "Emanuele", "Fortunato", "Gregorio", "Leandro", "Mariano", "Nazario", "Orazio",
    "Placido", "Quirino", "Remo", "Savino", "Tiberio", "Valentino", "Zaccaria", "Bartolomeo",
    "Eusebio", "Fiorenzo", "Geminiano", "Ippolito", "Lazzaro", "Nerio", "Onofrio", "Pantaleone",
    "Rinaldo", "Secondo", "Tito", "Ugolino", "Virgilio", "Zeno", "Adelmo", "Giacomo", "Jacopo",
    "Taddeo", "Bortolo", "Elia", "Isidoro", "Sabino", "Alvaro", "Gualtiero", "Costanzo",
    "Leone", "Abelardo", "Adalgisa", "Augusto", "Abramo", "Eva", "Flaminia", "Terenzia",
    "Ciro", "Maria", "Maddalena", "Miriam",
)  # fmt: skip


class NamePool:
    """Hands out unique bot names.

    Once the pool runs dry names fall back to ``Bot<NNN>``.
    """

    def __init__(self, names: Iterable[str] = BOT_NAMES, rng: random.Random | None = None) -> None:
        """Initialize the pool (duplicates in ``names`` are ignored)."""
        self._available: list[str] = list(dict.fromkeys(names))
        self._reserved: set[str] = set()
        self._rng = rng or random.Random()  # noqa: S311

    def reserve(self, name: str | None) -> None:
        """Make sure ``name`` is never handed out."""
        if not name:
            return
        self._reserved.add(name)
        if name in self._available:
            self._available.remove(name)

    def next(self) -> str:
        """Draw a random unused name."""
        if not self._available:
            return f"Bot{self._rng.randint(100, 999)}"
        name = self._available.pop(self._rng.randrange(len(self._available)))
        self._reserved.add(name)
        return name

    def remaining(self) -> int:
        """Number of names left before the fallback kicks in."""
        return len(self._available)

    def is_reserved(self, name: str) -> bool:
        """Check whether a name was reserved or handed out."""
        return name in self._reserved
