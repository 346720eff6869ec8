"""Risk flag block."""

from typing import List

from .base import Block, BlockContext
from ..risk_flags import generate_risk_flags
from ..schemas import CompPackage, PackageGenerationInput


class RiskFlagBlock(Block):
    """Flags legal, tax and financial risks of the recommended package.

    Inputs (from context):
        - scenario: PackageGenerationInput
        - best_fit_package: CompPackage

    Optional context:
        - as_of: date the 409A check compares against (today if absent)

    Outputs (to context):
        - risk_flags: List[RiskFlag]
    """

    def inputs(self) -> List[str]:
        return ["scenario", "best_fit_package"]

    def outputs(self) -> List[str]:
        return ["risk_flags"]

    def execute(self, context: BlockContext) -> None:
        scenario: PackageGenerationInput = context.get("scenario")
        package: CompPackage = context.get("best_fit_package")

        flags = generate_risk_flags(
            package,
            scenario.company_context,
            scenario.role_profile,
            scenario.token_program,
            as_of=context.get_optional("as_of"),
        )
        context.set("risk_flags", flags)
