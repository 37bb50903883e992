from __future__ import annotations

from badge_ledger.models.issuer import Admin, Issuer
from badge_ledger.repos.store import Transaction

ISSUERS = "issuers"
ADMINS = "admins"


class IssuerRepo:
    def __init__(self, tx: Transaction) -> None:
        self._tx = tx

    def get(self, identity: str) -> Issuer | None:
        return self._tx.get(ISSUERS, identity)

    def put(self, issuer: Issuer) -> None:
        self._tx.put(ISSUERS, issuer.identity, issuer)

    def list_authorized(self) -> list[Issuer]:
        return [i for _, i in self._tx.scan(ISSUERS) if i.authorized]


class AdminRepo:
    def __init__(self, tx: Transaction) -> None:
        self._tx = tx

    def get(self, identity: str) -> Admin | None:
        return self._tx.get(ADMINS, identity)

    def add(self, admin: Admin) -> None:
        self._tx.put(ADMINS, admin.identity, admin)

    def remove(self, identity: str) -> bool:
        if self.get(identity) is None:
            return False
        self._tx.delete(ADMINS, identity)
        return True

    def list_all(self) -> list[Admin]:
        return [a for _, a in self._tx.scan(ADMINS)]
