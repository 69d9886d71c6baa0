from pytest_archon import archrule


def test_core_independence() -> None:
    """
    The core package must not import the SQLAlchemy adapter.
    It is the foundation and must remain infrastructure-free.
    """
    (
        archrule("core_is_independent")
        .match("cqrs_ddd_outbox*")
        .exclude("cqrs_ddd_outbox_sqlalchemy*")
        .should_not_import("cqrs_ddd_outbox_sqlalchemy*")
        .should_not_import("sqlalchemy*")
        .check("cqrs_ddd_outbox")
    )


def test_domain_isolation() -> None:
    """
    Domain layer should be self-contained.
    It must not import from adapters, ports, or the outbox services.
    """
    (
        archrule("domain_isolation")
        .match("cqrs_ddd_outbox.domain*")
        .should_not_import("cqrs_ddd_outbox.adapters*")
        .should_not_import("cqrs_ddd_outbox.ports*")
        .should_not_import("cqrs_ddd_outbox.outbox*")
        .check("cqrs_ddd_outbox")
    )


def test_primitives_isolation() -> None:
    """
    Primitives layer is the lowest level.
    It must not import from any other layer of the package.
    """
    (
        archrule("primitives_isolation")
        .match("cqrs_ddd_outbox.primitives*")
        .should_not_import("cqrs_ddd_outbox.domain*")
        .should_not_import("cqrs_ddd_outbox.adapters*")
        .should_not_import("cqrs_ddd_outbox.ports*")
        .should_not_import("cqrs_ddd_outbox.outbox*")
        .check("cqrs_ddd_outbox")
    )


def test_ports_layering() -> None:
    """
    Ports (interfaces) should not depend on Adapters (implementations).
    """
    (
        archrule("ports_layering")
        .match("cqrs_ddd_outbox.ports*")
        .should_not_import("cqrs_ddd_outbox.adapters*")
        .should_not_import("cqrs_ddd_outbox.outbox*")
        .check("cqrs_ddd_outbox")
    )


def test_outbox_services_use_ports_only() -> None:
    """
    Writer, tracker, retriever and dispatcher talk to storage through the
    ports; the in-memory adapters are for tests and wiring only.
    """
    (
        archrule("outbox_services_isolation")
        .match("cqrs_ddd_outbox.outbox*")
        .should_not_import("cqrs_ddd_outbox.adapters*")
        .check("cqrs_ddd_outbox")
    )
