"""TREA rate catalogue for savings products.

Sample values for Peruvian institutions, in annual percent. The table is
immutable and injected into the app; nothing in the calculator reads it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class AccountType:
    id: str
    name: str
    description: str


@dataclass(frozen=True)
class Institution:
    id: str
    name: str
    code: str
    kind: str  # "banks" or "financial"


@dataclass(frozen=True)
class RateTable:
    account_types: Tuple[AccountType, ...]
    institution_list: Tuple[Institution, ...]
    rates: Mapping[str, Mapping[str, float]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {
            account: MappingProxyType(dict(by_institution))
            for account, by_institution in self.rates.items()
        }
        object.__setattr__(self, "rates", MappingProxyType(frozen))

    def trea_for(self, account_type: str, institution_id: str) -> Optional[float]:
        by_institution = self.rates.get(account_type)
        if by_institution is None:
            return None
        return by_institution.get(institution_id)

    def institutions(self, kind: Optional[str] = None) -> List[Institution]:
        if kind is None:
            return list(self.institution_list)
        return [inst for inst in self.institution_list if inst.kind == kind]

    def institution(self, institution_id: str) -> Optional[Institution]:
        for inst in self.institution_list:
            if inst.id == institution_id:
                return inst
        return None

    def account_type(self, account_type_id: str) -> Optional[AccountType]:
        for account in self.account_types:
            if account.id == account_type_id:
                return account
        return None


_ACCOUNT_TYPES = (
    AccountType("caja_ahorro", "Caja de Ahorro", "Traditional savings account"),
    AccountType("cuenta_ahorro", "Cuenta de Ahorro", "Standard savings account"),
    AccountType("deposito_plazo", "Depósito a Plazo Fijo", "Fixed-term deposit"),
)

_INSTITUTIONS = (
    Institution("bcp", "Banco de Crédito del Perú (BCP)", "BCP", "banks"),
    Institution("bbva", "BBVA Perú", "BBVA", "banks"),
    Institution("interbank", "Interbank", "INTERBANK", "banks"),
    Institution("scotiabank", "Scotiabank Perú", "SCOTIABANK", "banks"),
    Institution("banco_nacion", "Banco de la Nación", "BN", "banks"),
    Institution("banco_pichincha", "Banco Pichincha", "PICHINCHA", "banks"),
    Institution("banco_ripley", "Banco Ripley", "RIPLEY", "banks"),
    Institution("banco_santander", "Banco Santander", "SANTANDER", "banks"),
    Institution("financiera_credinka", "Financiera Credinka", "CREDINKA", "financial"),
    Institution("financiera_edpyme", "EDPYME Alternativa", "EDPYME", "financial"),
    Institution("financiera_mibanco", "MiBanco", "MIBANCO", "financial"),
)

_TREA_RATES: Dict[str, Dict[str, float]] = {
    "caja_ahorro": {
        "bcp": 2.5,
        "bbva": 2.3,
        "interbank": 2.4,
        "scotiabank": 2.2,
        "banco_nacion": 2.0,
        "banco_pichincha": 2.6,
        "banco_ripley": 2.1,
        "banco_santander": 2.3,
        "financiera_credinka": 3.0,
        "financiera_edpyme": 3.2,
        "financiera_mibanco": 2.8,
    },
    "cuenta_ahorro": {
        "bcp": 2.8,
        "bbva": 2.6,
        "interbank": 2.7,
        "scotiabank": 2.5,
        "banco_nacion": 2.3,
        "banco_pichincha": 2.9,
        "banco_ripley": 2.4,
        "banco_santander": 2.6,
        "financiera_credinka": 3.3,
        "financiera_edpyme": 3.5,
        "financiera_mibanco": 3.1,
    },
    "deposito_plazo": {
        "bcp": 4.5,
        "bbva": 4.3,
        "interbank": 4.4,
        "scotiabank": 4.2,
        "banco_nacion": 4.0,
        "banco_pichincha": 4.6,
        "banco_ripley": 4.1,
        "banco_santander": 4.3,
        "financiera_credinka": 5.0,
        "financiera_edpyme": 5.2,
        "financiera_mibanco": 4.8,
    },
}


def default_rate_table() -> RateTable:
    return RateTable(
        account_types=_ACCOUNT_TYPES,
        institution_list=_INSTITUTIONS,
        rates=_TREA_RATES,
    )
