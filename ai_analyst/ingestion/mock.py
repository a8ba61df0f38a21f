"""Deterministic mock knowledge base used when no corpus file is configured.

The generated documents imitate the exports of a handful of enterprise
systems (CRM, marketing automation, ticketing, HRIS...). A small set of
hand-written documents is always placed first so the example queries
offered to users have reliable context.
"""

from __future__ import annotations

import datetime
import random
from typing import List, Optional, Sequence, TypeVar

from ..models import Document, DocumentMetadata
from ..storage.corpus import Corpus

T = TypeVar("T")

PRODUCTS = [
    "Pro Widget",
    "Mega Gadget",
    "Eco Module",
    "Synergy Hub",
    "Quantum Link",
    "Nova Core",
    "Flexi-Connector",
    "Data-Streamer",
]
REGIONS = ["North America", "Europe", "Asia-Pacific", "Latin America", "MEA"]
COMPETITORS = ["InnovateCorp", "FutureTech", "QuantumLeap Inc.", "DataWeavers", "Synergy Solutions"]
SENTIMENTS = [
    "overwhelmingly positive",
    "generally positive",
    "mixed",
    "somewhat negative",
    "largely negative",
]
SUPPORT_ISSUES = [
    "data sync errors",
    "login authentication problems",
    "UI rendering bugs",
    "billing questions",
    "feature requests",
]
CATEGORIES = ["Sales", "Marketing", "Support", "Product", "HR", "Competitive"]

EXAMPLE_QUERIES = [
    "Compare Q1 vs Q2 2024 sales for the Pro Widget in North America and Europe.",
    "What was customer sentiment after the Phoenix app update? Any major bugs?",
    "Analyze the ROI for the 'Summer Splash' marketing campaign and its impact on user sign-ups.",
    "Summarize InnovateCorp's strategy based on our Q2 competitive analysis notes.",
]

HAND_CRAFTED_RECORDS = [
    {
        "id": "sales_q1_2024",
        "title": "Q1 2024 Sales Report",
        "content": (
            "Q1 2024 concluded with total revenue of $6.8M, a strong 12% increase YoY. "
            "North America was the leading region with $3.1M. Europe followed with $2.5M, "
            "and Asia contributed $1.2M. The \"Pro Widget\" was the top seller at $2.2M, "
            "while the \"Mega Gadget\" brought in $1.8M. The newly launched \"Eco Module\" "
            "had a promising start with $0.5M in sales."
        ),
        "metadata": {
            "date": "2024-04-05",
            "source": "Salesforce",
            "tags": ["sales", "revenue", "q1", "2024", "pro widget", "mega gadget"],
        },
    },
    {
        "id": "sales_q2_2024",
        "title": "Q2 2024 Sales Report",
        "content": (
            "Q2 2024 saw continued growth, with total revenue reaching $7.5M. This marks a "
            "10% increase from Q1. North America sales grew to $3.5M, while Europe saw a "
            "slight increase to $2.7M. Asia experienced strong growth, reaching $1.3M. "
            "\"Pro Widget\" sales were particularly strong in Europe, totaling $1.1M for the "
            "region. The \"Eco Module\" sales doubled to $1.0M, showing strong market adoption."
        ),
        "metadata": {
            "date": "2024-07-08",
            "source": "Salesforce",
            "tags": ["sales", "revenue", "q2", "2024", "pro widget", "eco module"],
        },
    },
    {
        "id": "sales_na_deepdive_q1_2024",
        "title": "North America Sales Deep Dive - Q1 2024",
        "content": (
            "In North America, Q1 sales of the \"Pro Widget\" were $1.2M. The \"Mega Gadget\" "
            "accounted for $0.9M. The enterprise sales team closed 3 major deals worth over "
            "$250k each, contributing significantly to the regional performance."
        ),
        "metadata": {
            "date": "2024-04-10",
            "source": "Sales Analytics Team",
            "tags": ["sales", "north america", "q1", "2024", "pro widget"],
        },
    },
    {
        "id": "sales_eu_deepdive_q1_2024",
        "title": "Europe Sales Deep Dive - Q1 2024",
        "content": (
            "European sales for the \"Pro Widget\" in Q1 were $0.8M. The \"Mega Gadget\" "
            "performed well, with $0.7M in sales. The UK and Germany were the top two "
            "performing countries in the region."
        ),
        "metadata": {
            "date": "2024-04-12",
            "source": "Sales Analytics Team",
            "tags": ["sales", "europe", "q1", "2024", "pro widget"],
        },
    },
    {
        "id": "mktg_q2_2024_campaign",
        "title": "Q2 'Summer Splash' Campaign Performance",
        "content": (
            "The 'Summer Splash' marketing campaign ran from May to June 2024 with a total "
            "budget of $400k. The campaign generated 15,000 new user sign-ups. Google Ads had "
            "the lowest CPA at $22, driving 8,000 sign-ups. Social media (Meta/TikTok) had a "
            "CPA of $30 and drove 5,000 sign-ups. The campaign correlated with a 15% increase "
            "in website traffic and a notable lift in 'Eco Module' sales during the period."
        ),
        "metadata": {
            "date": "2024-07-02",
            "source": "Marketing Hub",
            "tags": ["marketing", "campaign", "q2", "2024", "roi", "cpa", "sign-ups"],
        },
    },
    {
        "id": "mktg_content_2024",
        "title": "Content Marketing Performance H1 2024",
        "content": (
            "In the first half of 2024, our blog traffic grew by 30%. The top-performing "
            "articles were \"5 Ways to Boost Productivity with the Pro Widget\" and \"Is the "
            "Eco Module Right For Your Business?\". These two articles generated over 500 "
            "marketing qualified leads (MQLs)."
        ),
        "metadata": {
            "date": "2024-07-15",
            "source": "Marketing Hub",
            "tags": ["marketing", "content", "h1", "2024", "mqls"],
        },
    },
    {
        "id": "support_phoenix_update",
        "title": "Customer Feedback on Phoenix App Update (v3.0)",
        "content": (
            "The Phoenix v3.0 update was released on May 15, 2024. Initial sentiment is "
            "mixed. A post-update survey with 1,000 users showed a 65% positive sentiment "
            "score, down from 75% for v2.9. Users praise the new customizable dashboard but "
            "criticize the removal of the legacy reporting feature. Support tickets increased "
            "by 20% in the week following the release. The most common bug report is a data "
            "synchronization issue on Android devices, affecting an estimated 5% of the user "
            "base. A hotfix is planned."
        ),
        "metadata": {
            "date": "2024-05-25",
            "source": "Zendesk Analytics",
            "tags": ["product", "customer support", "app update", "phoenix", "sentiment", "bugs"],
        },
    },
    {
        "id": "product_roadmap_h2_2024",
        "title": "Product Roadmap H2 2024",
        "content": (
            "Key initiatives for the second half of 2024 include: 1) Internationalization of "
            "the Phoenix App, adding support for Spanish and German. 2) Launching \"Pro Widget "
            "v2\" with enhanced AI features. 3) Re-introducing an improved version of the "
            "legacy reporting feature based on user feedback."
        ),
        "metadata": {
            "date": "2024-06-20",
            "source": "Product Board",
            "tags": ["product", "roadmap", "h2", "2024", "phoenix"],
        },
    },
    {
        "id": "comp_innovatecorp_q2",
        "title": "Competitive Analysis: InnovateCorp Q2 2024",
        "content": (
            "Our main competitor, InnovateCorp, launched their 'Synergy Hub' product in "
            "April. It directly competes with our 'Mega Gadget'. Their pricing is 10% lower "
            "than ours. Marketing intelligence suggests they are heavily investing in "
            "influencer marketing and have poached a key sales director from a rival firm. "
            "They appear to be targeting mid-market customers, a segment where we have been "
            "traditionally strong."
        ),
        "metadata": {
            "date": "2024-06-30",
            "source": "Competitive Intel Team",
            "tags": ["competitor", "innovatecorp", "q2", "2024", "strategy"],
        },
    },
]


def _slug(value: str) -> str:
    return value.lower().replace(" ", "-", 1)


class _DocumentFactory:
    """Produce one synthetic document per call from a seeded RNG."""

    def __init__(self, rng: random.Random, today: datetime.date) -> None:
        self.rng = rng
        self.today = today

    def choice(self, values: Sequence[T]) -> T:
        return self.rng.choice(values)

    def number(self, low: float, high: float, decimals: int = 2) -> float:
        return round(self.rng.uniform(low, high), decimals)

    def integer(self, low: int, high: int) -> int:
        return self.rng.randint(low, high)

    def date(self) -> datetime.date:
        year = self.rng.randint(self.today.year - 2, self.today.year)
        candidate = datetime.date(year, self.rng.randint(1, 12), self.rng.randint(1, 28))
        if candidate > self.today:
            candidate = candidate.replace(year=candidate.year - 1)
        return candidate

    def build(self, index: int) -> Document:
        category = self.choice(CATEGORIES)
        when = self.date()
        quarter = (when.month - 1) // 3 + 1
        product = self.choice(PRODUCTS)
        builder = getattr(self, f"_{category.lower()}")
        title, content, source, tags = builder(when, quarter, product)
        return Document(
            id=f"{category.lower()}_{index}_{when.strftime('%Y%m%d')}",
            title=title,
            content=content,
            metadata=DocumentMetadata(source=source, date=when, tags=frozenset(tags)),
        )

    # ------------------------------------------------------------------
    # Category templates
    # ------------------------------------------------------------------
    def _sales(self, when: datetime.date, quarter: int, product: str):
        region = self.choice(REGIONS)
        revenue = self.number(0.5, 5.0, 1)
        change = self.number(-15, 25, 1)
        direction = "increase" if change >= 0 else "decrease"
        title = f"Q{quarter} {when.year} Sales Summary for {product} in {region}"
        content = (
            f"In Q{quarter} {when.year}, sales for the {product} in {region} reached ${revenue}M. "
            f"This represents a {abs(change)}% {direction} compared to the previous quarter. "
            "The performance was driven by strong demand in the enterprise segment and "
            "successful upselling initiatives."
        )
        tags = ["sales", f"q{quarter}", str(when.year), _slug(product), _slug(region)]
        return title, content, "Salesforce", tags

    def _marketing(self, when: datetime.date, quarter: int, product: str):
        season = self.choice(["Spring", "Summer", "Fall", "Winter"])
        campaign = f"{season} {self.choice(['Ignite', 'Growth', 'Connect', 'Launch'])}"
        cpa = self.number(15, 50, 2)
        signups = self.integer(1000, 20000)
        title = f"Performance Review: '{campaign}' Campaign"
        content = (
            f"The '{campaign}' campaign, which ran in {when.strftime('%B')} {when.year}, "
            f"concluded successfully. It generated {signups} new user sign-ups with an average "
            f"Cost Per Acquisition (CPA) of ${cpa}. The primary channels were Google Ads and "
            "Social Media, with email marketing providing strong support."
        )
        tags = ["marketing", "campaign", str(when.year), "cpa", "sign-ups"]
        return title, content, "Marketing Hub", tags

    def _support(self, when: datetime.date, quarter: int, product: str):
        tickets = self.integer(500, 2500)
        satisfaction = self.number(85, 98, 1)
        issue = self.choice(SUPPORT_ISSUES)
        share = self.integer(5, 25)
        month = when.strftime("%B")
        title = f"{month} {when.year} Customer Support Ticket Analysis for {product}"
        content = (
            f"During {month} {when.year}, we handled {tickets} support tickets related to "
            f"{product}. The overall customer satisfaction score was {satisfaction}%. The most "
            f"frequently reported issue was '{issue}', accounting for approximately {share}% of "
            "the tickets. Our engineering team is investigating the root cause."
        )
        tags = ["support", "tickets", str(when.year), _slug(product), "csat"]
        return title, content, "Zendesk", tags

    def _product(self, when: datetime.date, quarter: int, product: str):
        version = f"{self.integer(1, 4)}.{self.integer(0, 9)}.{self.integer(0, 9)}"
        sentiment = self.choice(SENTIMENTS)
        released = when - datetime.timedelta(days=15)
        title = f"User Feedback on {product} v{version} Release"
        content = (
            f"The release of {product} version {version} on {released.isoformat()} has "
            "garnered significant user feedback. Initial sentiment analysis indicates that the "
            f"response is {sentiment}. Users are praising the new customizable dashboard but "
            "have raised concerns about changes to the export workflow."
        )
        tags = ["product", "feedback", "release", f"v{version}", sentiment.split()[-1]]
        return title, content, "Product Board", tags

    def _hr(self, when: datetime.date, quarter: int, product: str):
        headcount = self.integer(500, 1500)
        turnover = self.number(1, 5, 1)
        engagement = self.integer(70, 90)
        title = f"Q{quarter} {when.year} Human Resources & People Operations Report"
        content = (
            f"As of the end of Q{quarter} {when.year}, total company headcount stands at "
            f"{headcount} employees. Quarterly employee turnover was {turnover}%. The recent "
            "employee engagement survey yielded a participation rate of 92% and an overall "
            f"engagement score of {engagement}%."
        )
        tags = ["hr", "headcount", "turnover", "engagement", f"q{quarter}", str(when.year)]
        return title, content, "HRIS", tags

    def _competitive(self, when: datetime.date, quarter: int, product: str):
        competitor = self.choice(COMPETITORS)
        offering = (
            f"{self.choice(['Apex', 'Zenith', 'Fusion', 'Matrix'])} "
            f"{self.choice(['Platform', 'Suite', 'OS', 'Connect'])}"
        )
        launch = when + datetime.timedelta(days=30)
        title = f"Competitive Intel Brief: {competitor}'s Latest Move"
        content = (
            f"Our intelligence team has confirmed that {competitor} is launching a new product, "
            f"the '{offering}', on {launch.isoformat()}. This product appears to be a direct "
            f"competitor to our {product}. Initial reports suggest their pricing will be highly "
            "aggressive to capture market share."
        )
        tags = ["competitor", competitor.lower(), "strategy", _slug(product)]
        return title, content, "Competitive Intel Team", tags


def generate_mock_corpus(
    count: int = 500,
    *,
    seed: int = 2024,
    today: Optional[datetime.date] = None,
    include_hand_crafted: bool = True,
) -> Corpus:
    """Build a reproducible corpus of ``count`` synthetic documents.

    Parameters
    ----------
    count:
        Number of generated documents, excluding the hand-crafted ones.
    seed:
        Seed of the random generator; the same seed and ``today`` always
        yield the same corpus.
    today:
        End of the three-year window the document dates are drawn from.
    include_hand_crafted:
        Prepend the fixed documents backing :data:`EXAMPLE_QUERIES`.
    """

    if count < 0:
        raise ValueError("count must be non-negative")

    factory = _DocumentFactory(random.Random(seed), today or datetime.date.today())
    documents: List[Document] = []
    if include_hand_crafted:
        documents.extend(Corpus.from_records(HAND_CRAFTED_RECORDS))
    documents.extend(factory.build(index) for index in range(count))
    return Corpus(documents)
