"""
Income Module - Net pay estimate for a cooperative member

Revenue incl. VAT -> revenue excl. VAT -> gross margin -> available result,
which becomes the payroll envelope split into employer charges, gross pay,
employee charges and net pay.
"""

DEFAULT_RATES = {
    'vat_rate': 0.20,
    'support_rate': 0.11,
    'variable_charges_rate': 0.009,
    'employee_charges_rate': 0.22,
    'fixed_employer_rate': 0.10,
}

# Net pay thresholds of the non-executive employer charge scale
LOW_NET = 1400
HIGH_NET = 2240
TOP_NET = 3500


def clamp(value, low, high):
    return min(high, max(low, value))


def to_number(value):
    """Parse '1 234,56' or '1234.56'; anything unreadable is 0"""
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = ''.join(str(value).split()).replace(',', '.', 1)
    try:
        number = float(cleaned)
    except ValueError:
        return 0.0
    if number != number or number in (float('inf'), float('-inf')):
        return 0.0
    return number


def patronal_rate_from_net(net):
    """Employer charge rate for a net monthly pay"""
    if net < LOW_NET:
        return 0.10
    if net < HIGH_NET:
        # Linear from 10% to 44% across the band
        t = (net - LOW_NET) / (HIGH_NET - LOW_NET)
        return 0.10 + t * (0.44 - 0.10)
    if net <= TOP_NET:
        return 0.44
    return 0.50


def _payroll(envelope, employer_rate, employee_rate):
    employer_charges = envelope * employer_rate
    gross_pay = envelope - employer_charges
    employee_charges = gross_pay * employee_rate
    return {
        'employer_charges': employer_charges,
        'gross_pay': gross_pay,
        'employee_charges': employee_charges,
        'net_pay': gross_pay - employee_charges,
    }


def compute_income(revenue_ttc, purchases=0.0, operating_costs=0.0,
                   progressive_employer_rate=False, **rates):
    """
    Walk revenue down to net pay

    Args:
        revenue_ttc (float): revenue including VAT
        purchases (float): purchases tied to the activity
        operating_costs (float): fixed running costs
        progressive_employer_rate (bool): use the net pay scale instead of
            ``fixed_employer_rate``
        **rates: overrides for DEFAULT_RATES, each clamped to [0, 1]

    Returns:
        dict: every intermediate amount plus the employer rate used
    """
    unknown = set(rates) - set(DEFAULT_RATES)
    if unknown:
        raise TypeError(f"Unknown rate(s): {', '.join(sorted(unknown))}")
    r = {key: clamp(rates.get(key, default), 0, 1) for key, default in DEFAULT_RATES.items()}

    revenue_ht = revenue_ttc / (1 + r['vat_rate'])
    gross_margin = revenue_ht - purchases
    support = gross_margin * r['support_rate']
    variable_charges = revenue_ht * r['variable_charges_rate']
    available = gross_margin - support - variable_charges - operating_costs

    employer_rate = r['fixed_employer_rate']
    if progressive_employer_rate:
        # The rate depends on the net it produces; a few passes settle it
        net_guess = _payroll(available, 0.10, r['employee_charges_rate'])['net_pay']
        for _ in range(4):
            employer_rate = patronal_rate_from_net(net_guess)
            net_guess = _payroll(available, employer_rate, r['employee_charges_rate'])['net_pay']

    result = {
        'revenue_ttc': revenue_ttc,
        'revenue_ht': revenue_ht,
        'purchases': purchases,
        'gross_margin': gross_margin,
        'support': support,
        'variable_charges': variable_charges,
        'operating_costs': operating_costs,
        'available': available,
        'payroll': available,
        'employer_rate': employer_rate,
        'rates': r,
    }
    result.update(_payroll(available, employer_rate, r['employee_charges_rate']))
    return result


__all__ = ['DEFAULT_RATES', 'compute_income', 'patronal_rate_from_net', 'to_number']
