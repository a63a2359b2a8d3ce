# knapsack_stepper/utils/run_utils.py
import datetime
from types import SimpleNamespace


def create_run_name(config: SimpleNamespace, prefix: str = "run") -> str:
    """
    Creates a unique and informative name for a verification or stepping run.

    Args:
        config (SimpleNamespace): The configuration object for the run.
        prefix (str): A short label for the kind of run, e.g. 'verify'.

    Returns:
        str: A unique name, e.g., 'verify_20250622_210000_n0-10_seed42'
    """
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")

    try:
        start_n, stop_n = config.verification.n_range[0], config.verification.n_range[1]
        seed = config.verification.seed
        run_name = f"{prefix}_{timestamp}_n{start_n}-{stop_n}_seed{seed}"
    except AttributeError:
        # Fallback for runs without a verification section
        run_name = f"{prefix}_{timestamp}"

    return run_name
