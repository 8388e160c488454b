# engine/__init__.py

# Tax calculations used by the projection and by callers sizing gross income.
from .tax_engine import (
    TaxpayerInfo,
    TaxResult,
    calculate_pre_tax_income,
    calculate_taxes,
    progressive_tax,
)

# Expose the projection (for the session and command line)
from .simulator import project, snapshots_to_dataframe
