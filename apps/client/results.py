# apps/client/results.py

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class MutationResult:
    """
    Resultado de uma mutação do RetroStore

    As mutações não levantam exceção: falhas voltam como
    MutationResult.failure(...) com a mensagem do servidor.
    """

    ok: bool
    value: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    @classmethod
    def success(cls, value=None):
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error, status_code=None):
        return cls(ok=False, error=str(error), status_code=status_code)

    @property
    def tag(self):
        return 'ok' if self.ok else 'failure'

    def __bool__(self):
        return self.ok
