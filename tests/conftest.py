import pytest
import amlpy as ap
import warnings
import logging
from typing import Optional

logger = logging.getLogger(__name__)

def _parse_solver_option(solver_option: Optional[str]) -> Optional[list[str]]:
    """
    Parse the --solver option into a list of solver names.

    Returns 'None' if no solver was specified, otherwise the list of names
    (e.g. ['ortools:scip', 'ortools:cbc']). The special "all" keyword expands
    to all installed solvers and subsolvers.
    """
    if solver_option is None:
        return None

    solvers = [s.strip() for s in solver_option.split(",") if s.strip()]
    if not solvers:
        warnings.warn('--solver option set, but no solver specified. Using the default solvers.')
        return None

    if "all" in solvers:
        return ap.SolverLookup.supported()
    return solvers

def pytest_addoption(parser):
    """
    Adds cli arguments to the pytest command
    """
    parser.addoption(
        "--solver", type=str, action="store", default=None,
        help="Run the solver tests on these MIP solvers, a single name or a comma-separated list (e.g. 'ortools:scip,ortools:cbc'), or 'all' for all installed ones."
    )

@pytest.fixture
def solver(request):
    """
    The MIP solver to use in tests that are not specific to one solver.

    Set through `--solver=<NAME>`, default is OR-Tools' SCIP backend.
    """
    if hasattr(request, "param"):
        solver_value = request.param
    else:
        parsed_solvers = _parse_solver_option(request.config.getoption("--solver"))
        supported = ap.SolverLookup.supported()
        installed = [name for name in parsed_solvers or [] if name in supported]
        # unittest classes are not parametrized, they run on the first installed solver
        solver_value = installed[0] if installed else (parsed_solvers or ["ortools:scip"])[0]
    if solver_value not in ap.SolverLookup.supported():
        pytest.skip(f"Solver {solver_value} not installed")

    # Set solver value on class if available (for tests using self.solver)
    if hasattr(request, "cls") and request.cls:
        request.cls.solver = solver_value

    return solver_value

def pytest_configure(config):
    # Configure logging for test filtering information
    logging.basicConfig(
        level=logging.INFO,
        format='%(levelname)s: %(message)s'
    )

    # Register custom marker for pytest test collecting
    config.addinivalue_line(
        "markers",
        "requires_solver(name): mark test as requiring a specific solver", # to skip tests when required solver is not installed
    )

    solver_option = config.getoption("--solver")
    parsed_solvers = _parse_solver_option(solver_option)
    if parsed_solvers:
        not_installed = set(parsed_solvers) - set(ap.SolverLookup.supported())
        if not_installed:
            warnings.warn(f"The following solvers are not installed and will not be tested: {', '.join(sorted(not_installed))}.")
        logger.info(f"Using solvers: {', '.join(parsed_solvers)}")

def pytest_generate_tests(metafunc):
    """
    Parametrize the tests that use the 'solver' fixture with all solvers given on the command line.
    """
    if "solver" not in metafunc.fixturenames:
        return
    parsed_solvers = _parse_solver_option(metafunc.config.getoption("--solver"))
    if parsed_solvers is not None and len(parsed_solvers) > 1:
        metafunc.parametrize("solver", parsed_solvers, indirect=True)

def pytest_collection_modifyitems(config, items):
    """
    Skip tests whose required solver (or subsolver) is not installed on this system.
    """
    supported = set(ap.SolverLookup.supported())
    for item in items:
        marker = item.get_closest_marker("requires_solver")
        if marker is None:
            continue
        missing = [name for name in marker.args if name not in supported]
        if missing:
            item.add_marker(pytest.mark.skip(reason=f"Solver {', '.join(missing)} not installed"))
            continue
        # the 'solver' fixture must also be usable
        if "solver" in getattr(item, "fixturenames", []) and hasattr(item, "callspec"):
            name = item.callspec.params.get("solver")
            if name is not None and name not in supported:
                item.add_marker(pytest.mark.skip(reason=f"Solver {name} not installed"))
