"""Pull a rotation variable towards a prior mean with pyceres, then retract an update."""

import logging

import numpy as np
import pyceres

from shonan import SOn, FrobeniusPrior

logger = logging.getLogger(__name__)


def main(n: int = 4) -> None:
    prior_mean = SOn.random(n, rng=42, scale=0.5)
    x = SOn.identity(n).vec()

    problem = pyceres.Problem()
    problem.add_residual_block(FrobeniusPrior(prior_mean.matrix), None, [x])

    options = pyceres.SolverOptions()
    options.linear_solver_type = pyceres.LinearSolverType.DENSE_QR
    summary = pyceres.SolverSummary()
    pyceres.solve(options, problem, summary)

    logger.info(f"Status: {summary.termination_type}")
    logger.info(f"Initial cost: {summary.initial_cost:.6f}")
    logger.info(f"Final cost: {summary.final_cost:.6e}")

    # the unconstrained solution drifts off SO(n); express it as a tangent step
    estimate = SOn(x.reshape((n, n), order="F"))
    xi = SOn.local_coordinates(estimate)
    retracted = SOn.retract(xi)
    logger.info(f"Estimate orthogonal: {estimate.is_orthogonal(tol=1e-6)}")
    logger.info(f"Distance to prior after retraction: {np.linalg.norm(retracted.matrix - prior_mean.matrix):.3e}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
