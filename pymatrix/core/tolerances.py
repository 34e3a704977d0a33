"""
Numeric tolerances and iteration limits.

Single source of truth for every threshold the kernel uses. Public
operations take these as keyword defaults so callers can override them
per call; nothing here is read from the environment.

Tolerance tiers define how closely a result is expected to match its
mathematical definition:
- EXACT: elementary arithmetic on small integers
- DECOMPOSITION: reconstruction of A from its factors
- INVERSE: A @ inv(A) against the identity
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance tier for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


EXACT = ToleranceTier(
    rtol=0.0,
    atol=0.0,
    name='exact',
    description='Bitwise equality, integer-valued arithmetic',
)

DECOMPOSITION = ToleranceTier(
    rtol=1e-9,
    atol=1e-10,
    name='decomposition',
    description='Factor products reconstruct the input matrix',
)

INVERSE = ToleranceTier(
    rtol=1e-8,
    atol=1e-8,
    name='inverse',
    description='A @ inv(A) matches identity for well-conditioned A',
)

# Pivot / determinant magnitude below which a matrix is treated as singular.
SINGULAR_TOL = 1e-10

# Singular values with sigma_i / sigma_max at or below this do not count
# toward the numerical rank.
RANK_RTOL = 1e-10

# Relative asymmetry below which eigen() takes the symmetric path.
SYMMETRY_RTOL = 1e-12

# Cofactor expansion is O(n!); above this size a RuntimeWarning is emitted.
COFACTOR_WARNING_SIZE = 8

# Jacobi eigenvalue / one-sided Jacobi SVD.
JACOBI_MAX_SWEEPS = 100

# Shifted QR iteration budget per deflated eigenvalue.
QR_MAX_ITERATIONS = 100

# Shifts at these iteration counts are replaced by exceptional shifts to
# break cycles.
QR_EXCEPTIONAL_SHIFTS = (10, 20, 40, 60, 80)

# Inverse iteration steps per eigenvector.
INVERSE_ITERATION_STEPS = 5

# Relative residual ||A v - lambda v|| / ||A|| an eigenvector must reach.
EIGEN_RESIDUAL_TOL = 1e-6

# Eigenvalues closer than this (relative to ||A||) share an eigenspace
# search.
EIGEN_CLUSTER_RTOL = 1e-6

# A unit eigenvector whose component outside the span of its cluster's
# earlier vectors is at or below this counts as dependent on them
# (about sqrt(eps)).
EIGEN_INDEPENDENCE_TOL = 1.5e-8

# Imaginary parts at or below this (relative to ||A||) are dropped.
EIGEN_IMAG_RTOL = 1e-10


def select_tolerance(operation: str) -> ToleranceTier:
    """Select the tolerance tier used to verify an operation."""
    if operation in ('inverse', 'solve'):
        return INVERSE
    if operation in ('add', 'subtract', 'multiply', 'transpose'):
        return EXACT
    return DECOMPOSITION
