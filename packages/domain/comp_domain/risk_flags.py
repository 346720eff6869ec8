"""Risk flags for a recommended package.

Each check looks at one legal, tax or financial concern and returns zero or
more ``RiskFlag`` objects. ``generate_risk_flags`` runs every check in a
fixed order.

The 409A check compares against ``as_of`` (today when omitted); pass a
date to keep results reproducible.
"""

from datetime import date
from typing import List, Optional

from .calc import calculate_runway_impact
from .schemas import (
    CompanyContext,
    CompanyStage,
    CompPackage,
    EquityType,
    GeoMarket,
    JobLevel,
    RiskFlag,
    RiskFlagSeverity,
    RiskFlagType,
    RoleProfile,
    TokenProgram,
)

ISO_ANNUAL_LIMIT = 100_000
STALE_409A_MONTHS = 12
LARGE_GRANT_PERCENT_FD = 0.5

# Rough stage defaults used when the package carries no strike price
ESTIMATED_STRIKE_PRICE = {
    CompanyStage.PRE_SEED: 0.10,
    CompanyStage.SEED: 0.25,
    CompanyStage.SERIES_A: 0.75,
    CompanyStage.SERIES_B: 2.00,
    CompanyStage.SERIES_C_PLUS: 5.00,
}

ESTIMATED_MONTHLY_BURN = {
    CompanyStage.PRE_SEED: 50_000,
    CompanyStage.SEED: 100_000,
    CompanyStage.SERIES_A: 250_000,
    CompanyStage.SERIES_B: 500_000,
    CompanyStage.SERIES_C_PLUS: 1_000_000,
}


def generate_risk_flags(
    package: CompPackage,
    company: CompanyContext,
    role: RoleProfile,
    token_program: Optional[TokenProgram] = None,
    as_of: Optional[date] = None,
) -> List[RiskFlag]:
    as_of = as_of or date.today()
    flags: List[RiskFlag] = []
    flags.extend(check_409a_dependency(package, company, as_of))
    flags.extend(check_iso_limits(package, company))
    flags.extend(check_83b_election(package))
    flags.extend(check_token_risks(package, token_program))
    flags.extend(check_pool_exhaustion(package, company))
    flags.extend(check_runway_impact(package, company))
    flags.extend(check_jurisdiction(role))
    flags.extend(check_board_approval(package, role))
    return flags


# =============================================================================
# Equity
# =============================================================================

def check_409a_dependency(package: CompPackage, company: CompanyContext, as_of: date) -> List[RiskFlag]:
    if package.equity_type not in (EquityType.ISO, EquityType.NSO):
        return []

    last_409a = company.cap_table.last_409a_date if company.cap_table else None
    months_since = (as_of - last_409a).days / 30 if last_409a else None
    stale = months_since is not None and months_since > STALE_409A_MONTHS

    description = (
        "Strike price must be set at or above fair market value (FMV) determined by a 409A valuation. "
    )
    if stale:
        description += f"Last 409A was {round(months_since)} months ago - consider refreshing."
    elif last_409a:
        description += "Current 409A valuation appears recent."
    else:
        description += "No 409A valuation date on file."

    return [RiskFlag(
        type=RiskFlagType.VALUATION_409A,
        severity=RiskFlagSeverity.WARNING if stale else RiskFlagSeverity.INFO,
        title="409A Valuation Required",
        description=description,
        action_required=(
            "Obtain or update 409A valuation before issuing grants"
            if stale or not last_409a else None
        ),
    )]


def check_iso_limits(package: CompPackage, company: CompanyContext) -> List[RiskFlag]:
    flags: List[RiskFlag] = []

    if package.equity_type == EquityType.ISO:
        strike_price = package.strike_price or ESTIMATED_STRIKE_PRICE[company.stage]
        years = package.vesting_schedule.total_months / 12
        annual_vesting_value = package.equity_option_count / years * strike_price

        if annual_vesting_value > ISO_ANNUAL_LIMIT:
            flags.append(RiskFlag(
                type=RiskFlagType.ISO_LIMIT,
                severity=RiskFlagSeverity.WARNING,
                title="ISO Annual Limit May Be Exceeded",
                description=(
                    f"Annual vesting value (~${round(annual_vesting_value):,}) may exceed the "
                    f"${ISO_ANNUAL_LIMIT:,} ISO limit. Options exceeding this limit will be "
                    "treated as NSOs for tax purposes."
                ),
                action_required="Consider splitting grant between ISOs and NSOs, or discuss with tax counsel",
            ))

        flags.append(RiskFlag(
            type=RiskFlagType.ISO_NSO_SELECTION,
            severity=RiskFlagSeverity.INFO,
            title="ISO Tax Treatment",
            description=(
                "ISOs may qualify for favorable tax treatment if holding period requirements are met. "
                "Employee should consult a tax advisor regarding AMT implications and optimal exercise timing."
            ),
        ))

    elif package.equity_type == EquityType.NSO:
        flags.append(RiskFlag(
            type=RiskFlagType.ISO_NSO_SELECTION,
            severity=RiskFlagSeverity.INFO,
            title="NSO Tax Treatment",
            description=(
                "NSOs are taxed as ordinary income upon exercise. The spread between strike price "
                "and FMV at exercise is subject to income tax and employment taxes."
            ),
        ))

    return flags


def check_83b_election(package: CompPackage) -> List[RiskFlag]:
    if package.equity_type != EquityType.RESTRICTED_STOCK:
        return []
    return [RiskFlag(
        type=RiskFlagType.ELECTION_83B,
        severity=RiskFlagSeverity.CRITICAL,
        title="83(b) Election Required",
        description=(
            "Restricted stock grants require a timely 83(b) election to potentially reduce tax burden. "
            "The election must be filed with the IRS within 30 days of the grant date. "
            "This deadline is strict and cannot be extended."
        ),
        action_required="Ensure employee files 83(b) election within 30 days of grant. Include form in offer materials.",
    )]


# =============================================================================
# Tokens
# =============================================================================

def check_token_risks(package: CompPackage, token_program: Optional[TokenProgram]) -> List[RiskFlag]:
    if not package.token_amount or token_program is None or not token_program.enabled:
        return []

    flags = [RiskFlag(
        type=RiskFlagType.TOKEN_TAX_WITHHOLDING,
        severity=RiskFlagSeverity.WARNING,
        title="Token Tax Withholding",
        description=(
            "Token compensation may trigger tax withholding obligations. The company may need to "
            "withhold taxes on token grants, which can be complex given token price volatility "
            "and liquidity constraints."
        ),
        action_required="Consult with tax counsel on withholding mechanics and establish clear policy",
    )]

    if token_program.lockup_months:
        flags.append(RiskFlag(
            type=RiskFlagType.TOKEN_TRANSFER_RESTRICTION,
            severity=RiskFlagSeverity.INFO,
            title="Token Transfer Restrictions",
            description=(
                f"Tokens are subject to a {token_program.lockup_months}-month lockup period after vesting. "
                "Employee cannot sell or transfer tokens during this period."
            ),
        ))

    flags.append(RiskFlag(
        type=RiskFlagType.TOKEN_TRANSFER_RESTRICTION,
        severity=RiskFlagSeverity.WARNING,
        title="Token Regulatory Considerations",
        description=(
            "Token grants may have securities law implications. Ensure the token program has been "
            "reviewed by securities counsel and appropriate exemptions or registrations are in place."
        ),
    ))
    return flags


# =============================================================================
# Company Finances
# =============================================================================

def check_pool_exhaustion(package: CompPackage, company: CompanyContext) -> List[RiskFlag]:
    """Only checked against a supplied cap table; estimates would flag noise."""
    cap_table = company.cap_table
    if cap_table is None:
        return []

    flags: List[RiskFlag] = []

    if package.pool_impact_percent > 25:
        critical = package.pool_impact_percent > 50
        pool_left = (
            package.pool_remaining_after / cap_table.option_pool_total * 100
            if cap_table.option_pool_total else 0.0
        )
        flags.append(RiskFlag(
            type=RiskFlagType.POOL_EXHAUSTION,
            severity=RiskFlagSeverity.CRITICAL if critical else RiskFlagSeverity.WARNING,
            title="Significant Pool Impact",
            description=(
                f"This grant uses {round(package.pool_impact_percent)}% of the remaining option pool. "
                f"After this grant, {round(pool_left)}% of the original pool will remain."
            ),
            action_required="Consider reducing grant size or planning for pool expansion" if critical else None,
        ))

    utilization = cap_table.pool_utilization_percent
    if utilization > 70:
        flags.append(RiskFlag(
            type=RiskFlagType.POOL_EXHAUSTION,
            severity=RiskFlagSeverity.CRITICAL if utilization > 85 else RiskFlagSeverity.WARNING,
            title="Option Pool Running Low",
            description=(
                f"The option pool is {round(utilization)}% utilized. "
                "Consider discussing pool expansion at next board meeting or financing round."
            ),
            action_required="Plan for option pool refresh with board",
        ))

    return flags


def check_runway_impact(package: CompPackage, company: CompanyContext) -> List[RiskFlag]:
    runway = company.runway_months
    if not runway or runway >= 18:
        return []

    impact = calculate_runway_impact(runway, ESTIMATED_MONTHLY_BURN[company.stage], package.burn_delta_monthly)
    new_runway, reduction = impact.new_runway_months, impact.runway_reduction

    if reduction <= 1:
        return []

    critical = new_runway < 12
    return [RiskFlag(
        type=RiskFlagType.RUNWAY_IMPACT,
        severity=RiskFlagSeverity.CRITICAL if critical else RiskFlagSeverity.WARNING,
        title="Runway Impact",
        description=(
            f"This hire reduces runway by approximately {reduction:.1f} months "
            f"(from {runway:g} to {new_runway:.1f} months)."
        ),
        action_required="Ensure hire is critical and consider fundraising timeline" if critical else None,
    )]


# =============================================================================
# Approvals and Jurisdiction
# =============================================================================

def check_jurisdiction(role: RoleProfile) -> List[RiskFlag]:
    if role.geo != GeoMarket.INTERNATIONAL:
        return []
    return [RiskFlag(
        type=RiskFlagType.NON_US_JURISDICTION,
        severity=RiskFlagSeverity.WARNING,
        title="International Hire - Local Counsel Required",
        description=(
            "Non-US hires may have different equity and compensation regulations. "
            "Tax treatment, equity restrictions, and employment laws vary significantly by jurisdiction."
        ),
        action_required="Engage local employment counsel to review offer structure and ensure compliance",
    )]


def check_board_approval(package: CompPackage, role: RoleProfile) -> List[RiskFlag]:
    is_executive = role.job_level in (JobLevel.DIRECTOR, JobLevel.VP, JobLevel.C_LEVEL)
    is_large_grant = package.equity_percent_fd > LARGE_GRANT_PERCENT_FD

    if not (is_executive or is_large_grant):
        return []

    if is_executive:
        description = "Executive compensation packages typically require board approval."
    else:
        description = f"Equity grant of {package.equity_percent_fd:.2f}% FD may require specific board approval."

    return [RiskFlag(
        type=RiskFlagType.BOARD_APPROVAL,
        severity=RiskFlagSeverity.INFO,
        title="Board Approval Likely Required",
        description=description,
        action_required="Verify board approval requirements and obtain necessary consents before extending offer",
    )]
