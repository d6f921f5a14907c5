from shonan import SOn, FrobeniusPrior
import timeit
import numpy as np


N = 100_000

for n in (3, 5, 10):
    xi = np.random.default_rng(0).normal(scale=0.1, size=SOn.dimension(n))
    SOn.hat(xi)  # warmup the jit

    print(f"SO({n})")
    print("hat")
    print(timeit.timeit(lambda: SOn.hat(xi), number=N))

    print("retract")
    print(timeit.timeit(lambda: SOn.retract(xi), number=N))

    R = SOn.retract(xi)
    print("vec")
    print(timeit.timeit(lambda: R.vec(), number=N))

    prior = FrobeniusPrior(np.eye(n))
    values = R.vec()
    residuals = np.empty(n * n)
    jacobian = np.empty(n ** 4)
    print("Evaluate")
    print(timeit.timeit(lambda: prior.Evaluate([values], residuals, [jacobian]), number=N))
