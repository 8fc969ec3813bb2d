"""
Registry pattern for extensible Riemann solvers and equations of state.

Usage:
    from eulerflux.registry import register_riemann_solver, get_riemann_solver

    @register_riemann_solver("pvl")
    class PVLSolver(RiemannSolver):
        ...

    solver = get_riemann_solver("pvl")()
"""

from typing import Any, Callable, TypeVar

# ---------------------------------------------------------------------------
# Generic registry
# ---------------------------------------------------------------------------

T = TypeVar("T", bound=Callable[..., Any])


class Registry:
    """Generic registry for named callables."""

    def __init__(self, name: str):
        self.name = name
        self._registry: dict[str, Callable[..., Any]] = {}

    def register(self, name: str) -> Callable[[T], T]:
        """Decorator to register a callable under a name."""
        def decorator(fn: T) -> T:
            if name in self._registry:
                raise ValueError(
                    f"{self.name} '{name}' is already registered"
                )
            self._registry[name] = fn
            return fn
        return decorator

    def get(self, name: str) -> Callable[..., Any]:
        """Get a registered callable by name."""
        if name not in self._registry:
            available = ", ".join(self.list_available())
            raise KeyError(
                f"Unknown {self.name}: '{name}'. Available: {available}"
            )
        return self._registry[name]

    def list_available(self) -> list[str]:
        """List all registered names."""
        return sorted(self._registry.keys())


# ---------------------------------------------------------------------------
# Specific registries
# ---------------------------------------------------------------------------

RIEMANN_SOLVERS = Registry("Riemann solver")
EQUATIONS_OF_STATE = Registry("equation of state")


# ---------------------------------------------------------------------------
# Convenience functions
# ---------------------------------------------------------------------------

def register_riemann_solver(name: str) -> Callable[[T], T]:
    """Decorator to register a Riemann solver class."""
    return RIEMANN_SOLVERS.register(name)


def get_riemann_solver(name: str) -> Callable[..., Any]:
    """Get a registered Riemann solver class by name."""
    return RIEMANN_SOLVERS.get(name)


def register_eos(name: str) -> Callable[[T], T]:
    """Decorator to register an equation-of-state factory."""
    return EQUATIONS_OF_STATE.register(name)


def get_eos(name: str) -> Callable[..., Any]:
    """Get a registered equation-of-state factory by name."""
    return EQUATIONS_OF_STATE.get(name)


def list_riemann_solvers() -> list[str]:
    """List the names of all registered Riemann solvers."""
    return RIEMANN_SOLVERS.list_available()
