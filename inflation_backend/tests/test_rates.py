from __future__ import annotations

import pytest
from flask.testing import FlaskClient

from inflation_backend.app import create_app
from inflation_backend.domain.rates import AccountType, Institution, RateTable, default_rate_table


def test_default_table_lookups():
    table = default_rate_table()

    assert table.trea_for("caja_ahorro", "bcp") == 2.5
    assert table.trea_for("deposito_plazo", "financiera_edpyme") == 5.2
    assert table.trea_for("caja_ahorro", "unknown") is None
    assert table.trea_for("unknown", "bcp") is None


def test_institutions_by_kind():
    table = default_rate_table()

    assert len(table.institutions()) == 11
    assert len(table.institutions("banks")) == 8
    assert {inst.id for inst in table.institutions("financial")} == {
        "financiera_credinka",
        "financiera_edpyme",
        "financiera_mibanco",
    }
    assert table.institution("bbva").code == "BBVA"
    assert table.institution("nope") is None
    assert table.account_type("cuenta_ahorro").name == "Cuenta de Ahorro"


def test_rate_table_is_read_only():
    source = {"savings": {"acme": 1.0}}
    table = RateTable(
        account_types=(AccountType("savings", "Savings", "Plain savings"),),
        institution_list=(Institution("acme", "Acme Bank", "ACME", "banks"),),
        rates=source,
    )
    source["savings"]["acme"] = 9.0

    assert table.trea_for("savings", "acme") == 1.0
    with pytest.raises(TypeError):
        table.rates["savings"]["acme"] = 2.0


def test_rate_endpoints(client: FlaskClient):
    account_types = client.get("/api/v1/rates/account-types").get_json()["data"]
    banks = client.get("/api/v1/rates/institutions", query_string={"kind": "banks"}).get_json()["data"]
    trea = client.get(
        "/api/v1/rates/trea",
        query_string={"account_type": "cuenta_ahorro", "institution_id": "interbank"},
    ).get_json()["data"]

    assert [account["id"] for account in account_types] == ["caja_ahorro", "cuenta_ahorro", "deposito_plazo"]
    assert all(bank["kind"] == "banks" for bank in banks)
    assert trea == {"account_type": "cuenta_ahorro", "institution_id": "interbank", "trea_rate": 2.7}


def test_rate_endpoint_errors(client: FlaskClient):
    unknown = client.get(
        "/api/v1/rates/trea",
        query_string={"account_type": "cuenta_ahorro", "institution_id": "nope"},
    )
    missing = client.get("/api/v1/rates/trea", query_string={"account_type": "cuenta_ahorro"})
    bad_kind = client.get("/api/v1/rates/institutions", query_string={"kind": "brokers"})

    assert unknown.status_code == 404
    assert missing.status_code == 400
    assert bad_kind.status_code == 400


def test_injected_rate_table_is_used(settings):
    table = RateTable(
        account_types=(AccountType("savings", "Savings", "Plain savings"),),
        institution_list=(Institution("acme", "Acme Bank", "ACME", "banks"),),
        rates={"savings": {"acme": 7.0}},
    )
    app = create_app(settings, rate_table=table)

    with app.test_client() as test_client:
        resp = test_client.post(
            "/api/v1/inflation/effect",
            json={
                "amount_nominal": 1000,
                "inflation_rate": 5,
                "years": 1,
                "account_type": "savings",
                "institution_id": "acme",
            },
        )

    data = resp.get_json()["data"]
    assert data["trea_rate"] == 7.0
    assert data["loss_percent"] == 0
