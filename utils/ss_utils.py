# utils/ss_utils.py

def calculate_annual_ss_benefit(
    current_age: int,
    start_age: int,
    monthly_amount: float,
    cola_percentage: float,
) -> float:
    """
    Annual Social Security income for one person at current_age.

    Nothing is paid before start_age. From start_age on, the monthly amount
    compounds by the COLA once per year already collected (no COLA in the
    first year) and is annualized.
    """
    if current_age < start_age:
        return 0.0

    years_collected = current_age - start_age
    monthly_benefit = monthly_amount * (1 + cola_percentage) ** years_collected
    return monthly_benefit * 12
