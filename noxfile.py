import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]

DOMAIN_TEST_DIRS = [
    "tests/identity/domain/",
    "tests/catalogue/domain/",
    "tests/cart/domain/",
    "tests/ordering/domain/",
    "tests/promotion/domain/",
    "tests/reviews/domain/",
    "tests/notifications/domain/",
]


def _install(session: nox.Session) -> None:
    """Install the project with all extras (test tooling included) into the nox virtualenv."""
    session.run("poetry", "install", "--all-extras", external=True)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer tests only (no HTTP layer involved)."""
    _install(session)
    session.run("pytest", *DOMAIN_TEST_DIRS)


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_bdd(session: nox.Session) -> None:
    """Run the Gherkin scenarios."""
    _install(session)
    session.run("pytest", "tests/ordering/bdd/")
