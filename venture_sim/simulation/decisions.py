"""
Decision Catalog

Template library for the decisions presented to the player:
- Initial decisions when a business is founded (product, marketing, hiring)
- Periodic decisions: 2-3 distinct areas per cycle, plus an occasional
  crisis-or-opportunity decision

Options carry explicit numeric levers (cost, CAC, growth fractions and an
impact delta); ConsequenceResolver combines them with the business state
at resolution time. Costs scale with the size of the business so later
decisions stay meaningful. Randomness comes only from the RandomSource
passed in.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..core.entities import (
    Business,
    Decision,
    DecisionOption,
    DecisionType,
    Effects,
    OptionMetrics,
    Urgency
)
from .random_source import RandomSource

# Monthly expense level at which template costs apply unscaled
REFERENCE_EXPENSES = 20000.0

URGENT_PROBABILITY = 0.3
SPECIAL_DECISION_PROBABILITY = 0.2


@dataclass(frozen=True)
class OptionTemplate:
    label: str
    description: str
    cost: float
    timeframe: str
    roi: str
    cac: Optional[float] = None
    revenue_growth: float = 0.0
    customer_growth: float = 0.0
    impact: Effects = field(default_factory=Effects)
    outcome: str = ""


@dataclass(frozen=True)
class DecisionTemplate:
    title: str
    description: str
    options: tuple[OptionTemplate, ...]
    deadline_months: int = 3
    scale_costs: bool = True


INITIAL_TEMPLATES: tuple[tuple[DecisionType, Urgency, DecisionTemplate], ...] = (
    (DecisionType.PRODUCT, Urgency.NORMAL, DecisionTemplate(
        title="Product Development Approach",
        description="How would you like to approach your initial product development?",
        scale_costs=False,
        options=(
            OptionTemplate(
                label="Minimum Viable Product (MVP)",
                description="Focus on building a basic version quickly to validate market fit",
                cost=10000, timeframe="Fast (1 quarter)", roi="Medium",
                impact=Effects(product_progress=20, expenses=1500),
                outcome=(
                    "You've started MVP development. This approach gives you a faster time "
                    "to market but may require more iterations later."
                )
            ),
            OptionTemplate(
                label="Full-Featured Product",
                description="Develop a comprehensive product with all planned features",
                cost=25000, timeframe="Slow (2-3 quarters)", roi="High",
                impact=Effects(product_progress=15, expenses=3500, valuation=20000),
                outcome=(
                    "You've started full-featured development. This will take longer but "
                    "may result in a more polished product."
                )
            ),
            OptionTemplate(
                label="Outsource Development",
                description="Hire external developers to build the product faster",
                cost=20000, timeframe="Medium (1-2 quarters)", roi="Low",
                impact=Effects(product_progress=25, expenses=2500),
                outcome=(
                    "You've outsourced development. This is faster but more expensive and "
                    "may result in less control over the product."
                )
            )
        )
    )),
    (DecisionType.MARKETING, Urgency.NORMAL, DecisionTemplate(
        title="Initial Marketing Strategy",
        description="How will you approach customer acquisition for your startup?",
        scale_costs=False,
        options=(
            OptionTemplate(
                label="Content Marketing",
                description="Create valuable content to attract and engage your target audience",
                cost=5000, timeframe="Slow (2+ quarters)", roi="High", cac=120,
                impact=Effects(expenses=700),
                outcome=(
                    "You've launched a content marketing strategy. It will take time to "
                    "build momentum, but can be very cost-effective long-term."
                )
            ),
            OptionTemplate(
                label="Paid Advertising",
                description="Invest in paid ads on search engines and social media",
                cost=15000, timeframe="Fast (immediate)", roi="Medium", cac=250,
                impact=Effects(expenses=1700),
                outcome=(
                    "You've launched paid advertising campaigns. This brings immediate "
                    "traffic but at a higher cost per customer."
                )
            ),
            OptionTemplate(
                label="Partnership & Referrals",
                description="Build strategic partnerships and referral programs",
                cost=3000, timeframe="Medium (1-2 quarters)", roi="Medium", cac=80,
                impact=Effects(expenses=350),
                outcome=(
                    "You've established partnerships and referral programs. This creates a "
                    "foundation for sustainable growth through relationships."
                )
            )
        )
    )),
    (DecisionType.HR, Urgency.LOW, DecisionTemplate(
        title="First Hiring Decision",
        description="It's time to grow your team. What role should you prioritize first?",
        deadline_months=6,
        scale_costs=False,
        options=(
            OptionTemplate(
                label="Product Developer",
                description="Hire a developer to accelerate product development",
                cost=15000, timeframe="Immediate", roi="Medium",
                impact=Effects(employees=1, product_progress=5, expenses=1700),
                outcome=(
                    "You've hired a Product Developer. Your product development will speed "
                    "up, helping you get to market faster."
                )
            ),
            OptionTemplate(
                label="Marketing Specialist",
                description="Hire a marketer to improve customer acquisition",
                cost=12000, timeframe="Immediate", roi="Medium",
                impact=Effects(employees=1, customers=8, expenses=1300),
                outcome=(
                    "You've hired a Marketing Specialist. Your customer acquisition efforts "
                    "will be more effective."
                )
            ),
            OptionTemplate(
                label="Operations Manager",
                description="Hire someone to handle daily operations and scaling",
                cost=14000, timeframe="Immediate", roi="Low",
                impact=Effects(employees=1, expenses=1500),
                outcome=(
                    "You've hired an Operations Manager. Your business operations will be "
                    "more efficient as you scale."
                )
            )
        )
    ))
)


PERIODIC_TEMPLATES: dict[DecisionType, tuple[DecisionTemplate, ...]] = {
    DecisionType.MARKETING: (
        DecisionTemplate(
            title="Marketing Campaign Strategy",
            description="Choose a marketing approach for the upcoming quarter",
            options=(
                OptionTemplate(
                    label="Content Marketing Focus",
                    description="Invest in blog content, SEO, and social media to build organic traffic.",
                    cost=12000, timeframe="Slow (3+ months)", roi="Medium", cac=180,
                    impact=Effects(expenses=1300),
                    outcome=(
                        "Your content marketing strategy is building momentum. Organic traffic "
                        "has increased and leads are growing steadily."
                    )
                ),
                OptionTemplate(
                    label="Paid Advertising Campaign",
                    description="Invest in search and social advertising for immediate results.",
                    cost=20000, timeframe="Fast (1 month)", roi="High", cac=250,
                    impact=Effects(expenses=2200),
                    outcome=(
                        "Your paid campaigns have driven immediate traffic and conversions, but "
                        "at a higher cost per acquisition."
                    )
                ),
                OptionTemplate(
                    label="Partnership & Referral Program",
                    description="Partner with complementary businesses and launch a referral program.",
                    cost=8000, timeframe="Medium (2 months)", roi="Medium", cac=150,
                    impact=Effects(expenses=800),
                    outcome=(
                        "Your partnership and referral programs are generating quality leads at "
                        "a lower cost, though volume is more modest."
                    )
                )
            )
        ),
        DecisionTemplate(
            title="Brand Positioning Update",
            description="How should we position our brand in the market?",
            options=(
                OptionTemplate(
                    label="Premium Value",
                    description="Position as a high-quality, premium solution with higher pricing",
                    cost=10000, timeframe="Medium (2-3 months)", roi="High", cac=300,
                    revenue_growth=0.15, impact=Effects(expenses=1000),
                    outcome=(
                        "Your premium positioning has attracted higher-value customers willing "
                        "to pay more, though acquisition is slower."
                    )
                ),
                OptionTemplate(
                    label="Affordable Solution",
                    description="Position as the best value for money with competitive pricing",
                    cost=8000, timeframe="Quick (1-2 months)", roi="Medium", cac=200,
                    revenue_growth=-0.05, impact=Effects(expenses=800),
                    outcome=(
                        "Your affordable positioning is attracting customers faster, with lower "
                        "average revenue per user."
                    )
                ),
                OptionTemplate(
                    label="Innovation Leader",
                    description="Position as the most innovative and cutting-edge solution",
                    cost=15000, timeframe="Longer (3-4 months)", roi="Very High", cac=350,
                    revenue_growth=0.25, impact=Effects(expenses=1700),
                    outcome=(
                        "Your innovation positioning has attracted early adopters willing to pay "
                        "premium prices for cutting-edge solutions."
                    )
                )
            )
        )
    ),
    DecisionType.PRODUCT: (
        DecisionTemplate(
            title="Product Development Focus",
            description="Where should we focus our product development resources this quarter?",
            options=(
                OptionTemplate(
                    label="New Features",
                    description="Develop new features to expand product capabilities",
                    cost=18000, timeframe="Medium (2-3 months)", roi="Medium",
                    impact=Effects(product_progress=15, expenses=2000),
                    outcome=(
                        "Your team has added several new features that widen your product's "
                        "appeal."
                    )
                ),
                OptionTemplate(
                    label="User Experience Improvements",
                    description="Enhance the UX/UI to improve user satisfaction and retention",
                    cost=12000, timeframe="Medium (2 months)", roi="High",
                    customer_growth=0.1, impact=Effects(product_progress=10, expenses=1300),
                    outcome=(
                        "The improved user experience has increased satisfaction and "
                        "word-of-mouth referrals."
                    )
                ),
                OptionTemplate(
                    label="Technical Debt & Performance",
                    description="Address technical debt and improve performance",
                    cost=15000, timeframe="Medium (2 months)", roi="Low",
                    impact=Effects(product_progress=5, expenses=-800),
                    outcome=(
                        "Paying down technical debt has made the platform faster and cheaper "
                        "to run."
                    )
                )
            )
        ),
        DecisionTemplate(
            title="Platform Expansion",
            description="Should we extend the product to new platforms or segments?",
            options=(
                OptionTemplate(
                    label="Mobile App",
                    description="Build a companion mobile application",
                    cost=22000, timeframe="Slow (3 months)", roi="High",
                    revenue_growth=0.12, impact=Effects(product_progress=8, expenses=2500, market_share=0.005),
                    outcome="Your mobile app has opened a new channel to reach customers."
                ),
                OptionTemplate(
                    label="Enterprise Features",
                    description="Add SSO, audit logs and admin controls for larger customers",
                    cost=25000, timeframe="Slow (3-4 months)", roi="Very High",
                    revenue_growth=0.15, impact=Effects(product_progress=5, expenses=2000),
                    outcome="Enterprise features are unlocking larger contracts."
                ),
                OptionTemplate(
                    label="Stay Focused",
                    description="Keep improving the core product for existing customers",
                    cost=5000, timeframe="Ongoing", roi="Medium",
                    impact=Effects(product_progress=6),
                    outcome="You doubled down on the core product your customers already love."
                )
            )
        )
    ),
    DecisionType.HR: (
        DecisionTemplate(
            title="Team Expansion",
            description="Which team should grow next?",
            options=(
                OptionTemplate(
                    label="Engineering",
                    description="Hire two engineers to accelerate the roadmap",
                    cost=30000, timeframe="Medium (1-2 months)", roi="Medium",
                    impact=Effects(employees=2, product_progress=8, expenses=5000, valuation=25000),
                    outcome="Two new engineers have joined and the roadmap is moving faster."
                ),
                OptionTemplate(
                    label="Sales",
                    description="Hire three sales representatives",
                    cost=27000, timeframe="Medium (2 months)", roi="High",
                    revenue_growth=0.1, impact=Effects(employees=3, customers=15, expenses=5500),
                    outcome="Your new sales team is opening doors and closing deals."
                ),
                OptionTemplate(
                    label="Hiring Freeze",
                    description="Hold headcount flat and preserve runway",
                    cost=0, timeframe="Immediate", roi="Low",
                    impact=Effects(expenses=-500),
                    outcome="You froze hiring. Costs are down but the team is stretched."
                )
            )
        ),
        DecisionTemplate(
            title="Employee Retention",
            description="Team morale is slipping. How do you respond?",
            options=(
                OptionTemplate(
                    label="Equity Refresh",
                    description="Grant additional stock options to key employees",
                    cost=2000, timeframe="Immediate", roi="Medium",
                    impact=Effects(valuation=-10000, product_progress=3),
                    outcome="The equity refresh has re-energized the team."
                ),
                OptionTemplate(
                    label="Salary Increases",
                    description="Raise salaries across the board",
                    cost=0, timeframe="Immediate", roi="Medium",
                    impact=Effects(expenses=2500, product_progress=4),
                    outcome="Higher salaries have improved morale, at a permanent cost."
                ),
                OptionTemplate(
                    label="Do Nothing",
                    description="Ride it out and hope morale recovers",
                    cost=0, timeframe="Immediate", roi="Low",
                    impact=Effects(employees=-1, product_progress=-3),
                    outcome="A frustrated team member has left the company."
                )
            )
        )
    ),
    DecisionType.FINANCE: (
        DecisionTemplate(
            title="Funding Strategy",
            description="How should we fund the next stage of growth?",
            scale_costs=False,
            options=(
                OptionTemplate(
                    label="Raise an Equity Round",
                    description="Pitch investors for a priced round",
                    cost=15000, timeframe="Slow (3-6 months)", roi="High",
                    impact=Effects(cash=500000, valuation=400000),
                    outcome="You closed a funding round. Your runway is extended significantly."
                ),
                OptionTemplate(
                    label="Bank Loan",
                    description="Take a loan with monthly repayments",
                    cost=2000, timeframe="Fast (1 month)", roi="Medium",
                    impact=Effects(cash=100000, expenses=1800),
                    outcome="The loan is in the bank. Repayments add to your monthly costs."
                ),
                OptionTemplate(
                    label="Stay Bootstrapped",
                    description="Keep full ownership and grow from revenue",
                    cost=0, timeframe="Ongoing", roi="Medium",
                    outcome="You chose to stay independent and grow from revenue."
                )
            )
        ),
        DecisionTemplate(
            title="Cost Review",
            description="Your accountant suggests reviewing monthly costs.",
            options=(
                OptionTemplate(
                    label="Renegotiate Vendors",
                    description="Renegotiate software and supplier contracts",
                    cost=1000, timeframe="Medium (1-2 months)", roi="High",
                    impact=Effects(expenses=-1500),
                    outcome="Vendor renegotiations have trimmed your monthly costs."
                ),
                OptionTemplate(
                    label="Downsize Office",
                    description="Move to a smaller, cheaper office",
                    cost=5000, timeframe="Medium (2 months)", roi="Medium",
                    impact=Effects(expenses=-2500, employees=-1),
                    outcome="The smaller office saves money, though one employee left over the move."
                ),
                OptionTemplate(
                    label="Keep Current Costs",
                    description="Costs are fine as they are",
                    cost=0, timeframe="Immediate", roi="Low",
                    outcome="You kept your cost structure unchanged."
                )
            )
        )
    ),
    DecisionType.OPERATIONS: (
        DecisionTemplate(
            title="Customer Support Model",
            description="Support requests are piling up. How do you handle them?",
            options=(
                OptionTemplate(
                    label="In-House Support Team",
                    description="Hire a dedicated support team",
                    cost=14000, timeframe="Medium (1-2 months)", roi="High",
                    customer_growth=0.05, impact=Effects(employees=2, expenses=3000),
                    outcome="Customers love the faster responses from your new support team."
                ),
                OptionTemplate(
                    label="Outsourced Support",
                    description="Contract an external support provider",
                    cost=6000, timeframe="Fast (2 weeks)", roi="Medium",
                    customer_growth=0.02, impact=Effects(expenses=1500),
                    outcome="Outsourced support is handling the load at a reasonable cost."
                ),
                OptionTemplate(
                    label="Self-Service Knowledge Base",
                    description="Build documentation and a help center",
                    cost=4000, timeframe="Slow (2-3 months)", roi="Medium",
                    impact=Effects(product_progress=2),
                    outcome="Your help center is deflecting many common questions."
                )
            )
        ),
        DecisionTemplate(
            title="Infrastructure Scaling",
            description="Usage is growing. How do you prepare your infrastructure?",
            options=(
                OptionTemplate(
                    label="Invest in Automation",
                    description="Automate deployment and monitoring",
                    cost=16000, timeframe="Medium (2 months)", roi="High",
                    impact=Effects(expenses=-1000, product_progress=4),
                    outcome="Automation has reduced operating costs and outages."
                ),
                OptionTemplate(
                    label="Scale Up Servers",
                    description="Buy more capacity as needed",
                    cost=5000, timeframe="Immediate", roi="Low",
                    impact=Effects(expenses=1200),
                    outcome="Extra capacity keeps the service responsive."
                ),
                OptionTemplate(
                    label="Wait and See",
                    description="Handle issues as they arise",
                    cost=0, timeframe="Immediate", roi="Low",
                    customer_growth=-0.03,
                    outcome="A few outages have frustrated some customers."
                )
            )
        )
    )
}


SPECIAL_TEMPLATES: tuple[tuple[DecisionType, DecisionTemplate], ...] = (
    (DecisionType.FINANCE, DecisionTemplate(
        title="Acquisition Offer",
        description="A larger company has expressed interest in a strategic partnership.",
        deadline_months=1,
        scale_costs=False,
        options=(
            OptionTemplate(
                label="Strategic Partnership",
                description="Accept investment and distribution in exchange for equity",
                cost=5000, timeframe="Fast (1 month)", roi="High",
                impact=Effects(cash=250000, valuation=150000, market_share=0.01),
                outcome="The partnership brings capital and a new distribution channel."
            ),
            OptionTemplate(
                label="Decline Politely",
                description="Stay independent for now",
                cost=0, timeframe="Immediate", roi="Medium",
                outcome="You declined the offer and remain fully independent."
            )
        )
    )),
    (DecisionType.OPERATIONS, DecisionTemplate(
        title="Major Client Escalation",
        description="Your largest client threatens to leave over service issues.",
        deadline_months=1,
        options=(
            OptionTemplate(
                label="Dedicated Account Team",
                description="Assign a team to fix their issues immediately",
                cost=10000, timeframe="Immediate", roi="Medium",
                impact=Effects(expenses=1000),
                outcome="The client is staying, reassured by your response."
            ),
            OptionTemplate(
                label="Offer a Discount",
                description="Give them three months at half price",
                cost=0, timeframe="Immediate", roi="Low",
                revenue_growth=-0.05,
                outcome="The discount kept the client, but revenue took a hit."
            ),
            OptionTemplate(
                label="Let Them Go",
                description="Focus on the rest of the customer base",
                cost=0, timeframe="Immediate", roi="Low",
                revenue_growth=-0.1, impact=Effects(customers=-1),
                outcome="Your largest client has left."
            )
        )
    ))
)


class DecisionCatalog:
    """Builds decisions from templates using an explicit random source."""

    def __init__(
        self,
        periodic_templates: dict = None,
        special_templates: tuple = None
    ):
        self.periodic_templates = periodic_templates or PERIODIC_TEMPLATES
        self.special_templates = special_templates or SPECIAL_TEMPLATES

    def cost_scale(self, business: Business) -> float:
        return min(3.0, max(0.5, business.expenses / REFERENCE_EXPENSES))

    def build(
        self,
        template: DecisionTemplate,
        decision_type: DecisionType,
        urgency: Urgency,
        business: Business,
        source: RandomSource
    ) -> Decision:
        """Instantiate a decision from a template."""
        scale = self.cost_scale(business) if template.scale_costs else 1.0

        options = tuple(
            DecisionOption(
                id=index,
                label=option.label,
                description=option.description,
                metrics=OptionMetrics(
                    cost=round(option.cost * scale, -2),
                    timeframe=option.timeframe,
                    roi=option.roi,
                    cac=option.cac,
                    revenue_growth=option.revenue_growth,
                    customer_growth=option.customer_growth,
                    impact=option.impact,
                    outcome=option.outcome
                )
            )
            for index, option in enumerate(template.options, start=1)
        )

        return Decision(
            id=source.uuid(),
            type=decision_type,
            title=template.title,
            description=template.description,
            urgency=urgency,
            options=options,
            created_month=business.month,
            deadline_month=business.month + template.deadline_months
        )

    def initial_decisions(self, business: Business, rng_state: int) -> tuple[tuple[Decision, ...], int]:
        """Decisions presented right after founding."""
        source = RandomSource(rng_state)
        decisions = tuple(
            self.build(template, decision_type, urgency, business, source)
            for decision_type, urgency, template in INITIAL_TEMPLATES
        )
        return decisions, source.next_state()

    def periodic_decisions(self, business: Business, rng_state: int) -> tuple[tuple[Decision, ...], int]:
        """2-3 decisions from distinct areas, plus an occasional special one."""
        source = RandomSource(rng_state)

        count = source.randint(2, 3)
        areas = source.sample(sorted(self.periodic_templates, key=lambda t: t.value), count)

        decisions = []
        for decision_type in areas:
            urgency = Urgency.URGENT if source.chance(URGENT_PROBABILITY) else Urgency.NORMAL
            template = source.choice(self.periodic_templates[decision_type])
            decisions.append(self.build(template, decision_type, urgency, business, source))

        if source.chance(SPECIAL_DECISION_PROBABILITY):
            decision_type, template = source.choice(self.special_templates)
            decisions.append(self.build(template, decision_type, Urgency.URGENT, business, source))

        return tuple(decisions), source.next_state()
