"""
Pydantic models for civic-compass records

Mirror the rows of the hosted database (and the payloads returned by its
edge functions) so query functions hand back validated, typed objects:
- Quiz records (topics, questions, answers, attempts)
- Candidates, donors, votes and officials
- Admin/reporting aggregates (coverage, sync stats, populate results)

Usage:
    from civic.lib.models import Candidate, TopicScore

    candidate = Candidate.model_validate(row)
    print(candidate.party.value, candidate.overall_score)
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Record(BaseModel):
    """Base for database rows; unknown columns are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# ============================================================================
# Enums
# ============================================================================


class Party(str, Enum):
    """Party affiliation as stored on candidates and officials"""

    DEMOCRAT = "Democrat"
    REPUBLICAN = "Republican"
    INDEPENDENT = "Independent"
    OTHER = "Other"


class OfficialLevel(str, Enum):
    FEDERAL_EXECUTIVE = "federal_executive"
    STATE_EXECUTIVE = "state_executive"
    STATE_LEGISLATIVE = "state_legislative"
    LOCAL = "local"


class CoverageTier(str, Enum):
    """Completeness of a profile's data"""

    TIER_1 = "tier_1"
    TIER_2 = "tier_2"
    TIER_3 = "tier_3"


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SourceType(str, Enum):
    """Where a candidate answer was sourced from"""

    VOTING_RECORD = "voting_record"
    PUBLIC_STATEMENT = "public_statement"
    CAMPAIGN_WEBSITE = "campaign_website"
    INTERVIEW = "interview"
    LEGISLATION = "legislation"
    OTHER = "other"


class VotePosition(str, Enum):
    YEA = "Yea"
    NAY = "Nay"
    PRESENT = "Present"
    NOT_VOTING = "Not Voting"


class DonorType(str, Enum):
    INDIVIDUAL = "Individual"
    PAC = "PAC"
    ORGANIZATION = "Organization"
    UNKNOWN = "Unknown"


# ============================================================================
# Quiz Models
# ============================================================================


class Topic(Record):
    """Policy category with the user's importance weight"""

    id: str = Field(..., description="Topic ID")
    name: str = Field(..., description="Display name")
    icon: str = Field("", description="Icon identifier")
    weight: float = Field(1, description="User-assigned importance (1-5)")


class TopicWeight(Record):
    """Selected topic and its weight, as passed to scoring"""

    id: str
    weight: float = 1


class TopicInfo(Record):
    id: str
    name: str


class TopicScore(Record):
    topic_id: str = Field(..., description="Topic ID")
    topic_name: str = Field(..., description="Topic display name")
    score: float = Field(..., description="Score for this topic")


class QuestionOption(Record):
    id: str
    text: str = ""
    value: float = Field(..., description="Signed lean, e.g. -10, -5, 0, 5, 10")
    display_order: Optional[int] = None


class Question(Record):
    id: str
    topic_id: str
    text: str = ""
    options: List[QuestionOption] = Field(default_factory=list)


class QuizAnswer(Record):
    """A selected option mapped to its signed value"""

    question_id: str
    value: float
    selected_option_id: Optional[str] = None


class QuizAttempt(Record):
    id: str
    user_id: str
    timestamp: datetime
    answers: List[QuizAnswer] = Field(default_factory=list)
    resulting_score: float


class ScoringResult(BaseModel):
    """Output of calculate_quiz_score"""

    overall: float = Field(..., description="Weighted overall score")
    by_topic: List[TopicScore] = Field(default_factory=list)


class User(Record):
    id: str
    email: str
    name: str
    location: Optional[str] = None
    top_topics: List[Topic] = Field(default_factory=list)
    overall_score: float = 0
    topic_scores: List[TopicScore] = Field(default_factory=list)
    quiz_history: List[QuizAttempt] = Field(default_factory=list)
    created_at: Optional[datetime] = None


# ============================================================================
# Candidate Models
# ============================================================================


class CandidateTopicScore(Record):
    topic_id: str
    score: float
    topics: Optional[Dict[str, Any]] = Field(
        None, description="Joined topic row (name, icon)"
    )


class Candidate(Record):
    id: str
    name: str
    party: Party
    office: str
    state: str
    district: Optional[str] = None
    image_url: Optional[str] = None
    overall_score: Optional[float] = None
    last_updated: Optional[str] = None
    coverage_tier: Optional[str] = None
    confidence: Optional[str] = None
    fec_committee_id: Optional[str] = None
    last_answers_sync: Optional[str] = None
    topic_scores: List[CandidateTopicScore] = Field(default_factory=list)


class Donor(Record):
    id: str
    name: str
    type: DonorType = DonorType.UNKNOWN
    amount: float = 0
    cycle: str = ""


class Vote(Record):
    id: str
    bill_id: str
    bill_name: str
    date: str
    position: VotePosition
    topic: str = ""
    description: Optional[str] = None


class CandidateAnswer(Record):
    id: str
    candidate_id: str
    question_id: str
    answer_value: float
    source_url: Optional[str] = None
    source_description: Optional[str] = None
    source_type: Optional[str] = Field(None, description="Free text; see SourceType for known values")
    confidence: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    question: Optional[Dict[str, Any]] = Field(
        None, description="Joined question row with its topic"
    )


class CandidateOverride(Record):
    """Admin-entered values that take precedence over API data"""

    id: Optional[str] = None
    candidate_id: str
    name: Optional[str] = None
    party: Optional[str] = None
    office: Optional[str] = None
    state: Optional[str] = None
    district: Optional[str] = None
    image_url: Optional[str] = None
    overall_score: Optional[float] = None
    coverage_tier: Optional[str] = None
    confidence: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    updated_by: Optional[str] = None


# ============================================================================
# Officials
# ============================================================================


class SocialMedia(Record):
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    youtube: Optional[str] = None
    instagram: Optional[str] = None


class DistrictOffice(Record):
    address: str
    city: str
    state: str
    zip: str
    phone: Optional[str] = None
    fax: Optional[str] = None
    building: Optional[str] = None
    suite: Optional[str] = None
    hours: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class Representative(Record):
    """Member of Congress (or executive) returned by fetch-representatives"""

    id: str
    name: str
    party: Party
    office: str
    state: str
    district: Optional[str] = None
    image_url: Optional[str] = None
    is_incumbent: bool = True
    bioguide_id: Optional[str] = None
    overall_score: Optional[float] = None
    coverage_tier: Optional[str] = None
    confidence: Optional[str] = None
    website_url: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    contact_form: Optional[str] = None
    fax: Optional[str] = None
    rss_url: Optional[str] = None
    dc_office: Optional[str] = None
    social_media: Optional[SocialMedia] = None
    district_offices: Optional[List[DistrictOffice]] = None


class RepresentativesResult(BaseModel):
    representatives: List[Representative] = Field(default_factory=list)
    district: Optional[str] = None
    state: Optional[str] = None


class StaticOfficial(Record):
    """Manually curated official (executives, state and local offices)"""

    id: str
    name: str
    party: Party
    office: str
    level: OfficialLevel
    state: str
    district: Optional[str] = None
    image_url: Optional[str] = None
    website_url: Optional[str] = None
    is_active: bool = True
    coverage_tier: str = CoverageTier.TIER_3.value
    confidence: str = ConfidenceLevel.LOW.value
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class OfficialTransition(Record):
    """Upcoming change of office after an election"""

    id: str
    official_name: str
    current_office: Optional[str] = None
    new_office: str
    state: str
    district: Optional[str] = None
    party: Optional[str] = None
    election_date: str
    inauguration_date: str
    transition_type: str
    source_url: Optional[str] = None
    ai_confidence: Optional[str] = None
    verified: Optional[bool] = None
    is_active: Optional[bool] = None


# ============================================================================
# Finance
# ============================================================================


class FECTotals(BaseModel):
    """Committee financial totals for one election cycle"""

    total_receipts: float = 0
    individual_itemized_contributions: float = 0
    individual_unitemized_contributions: float = 0
    other_receipts: float = 0
    total_disbursements: float = 0
    cash_on_hand_end_period: float = 0
    coverage_end_date: Optional[str] = None


# ============================================================================
# Admin / Reporting
# ============================================================================


class CandidateCoverage(BaseModel):
    candidate_id: str
    name: str
    party: str
    answer_count: int
    total_questions: int
    coverage_percent: float


class TopicCoverage(BaseModel):
    topic_id: str
    topic_name: str
    icon: str = ""
    total_questions: int
    total_candidates: int
    total_potential_answers: int
    total_actual_answers: int
    coverage_percent: float


class SyncStats(BaseModel):
    total_candidates: int
    total_questions: int
    total_potential_answers: int
    total_actual_answers: int
    overall_coverage_percent: float
    last_sync_time: Optional[str] = None
    candidate_coverage: List[CandidateCoverage] = Field(default_factory=list)
    topic_coverage: List[TopicCoverage] = Field(default_factory=list)


class CandidateAnswerCoverage(BaseModel):
    id: str
    name: str
    party: str
    office: str
    state: str
    answer_count: int
    total_questions: int
    percentage: int


class CandidateAnswerStats(BaseModel):
    total_candidates: int
    no_answers: int
    low_coverage: int
    full_coverage: int
    total_questions: int


class PartyAnswerStats(BaseModel):
    party_id: str
    party_name: str
    answer_count: int
    total_questions: int
    percentage: int


class InvertedScoreCandidate(BaseModel):
    """Candidate whose answer average contradicts their party's lean"""

    candidate_id: str
    name: str
    party: str
    office: str
    state: str
    calculated_score: float
    answer_count: int
    saved_score: Optional[float] = None
    status: str = "INVERTED"


class PartyPopulateResult(BaseModel):
    """Per-party counts reported by populate-party-answers"""

    party: str
    inserted: int = 0
    errors: int = 0


class PopulateResult(BaseModel):
    """Result of an answer-generation edge function call"""

    success: bool
    candidate_id: Optional[str] = None
    questions_processed: Optional[int] = None
    generated: Optional[int] = None
    existing: Optional[int] = None
    results: Optional[List[PartyPopulateResult]] = None
    error: Optional[str] = None


class QuestionComparison(BaseModel):
    question_id: str
    user_value: float
    candidate_value: float
    difference: float


class DetailedMatch(BaseModel):
    match_score: int
    shared_questions: int
    agreements: List[QuestionComparison] = Field(default_factory=list)
    disagreements: List[QuestionComparison] = Field(default_factory=list)


class MatchResult(BaseModel):
    candidate: Candidate
    match_score: int = Field(..., description="0-100%")
    agreements: List[TopicScore] = Field(default_factory=list)
    disagreements: List[TopicScore] = Field(default_factory=list)


class AdminErrorType(str, Enum):
    FEC_ID = "fec_id"
    DONORS = "donors"
    COMMITTEES = "committees"
    RECONCILIATION = "reconciliation"
    AI_ANSWERS = "ai_answers"


class AdminError(BaseModel):
    id: str
    type: AdminErrorType
    candidate_id: str
    candidate_name: str
    message: str
    timestamp: datetime
