"""Skillset inference from free-text roles and task descriptions.

A bag-of-keywords heuristic: a keyword found anywhere in the lowercased
text contributes its skill tokens.  The same text always yields the same
skillset.
"""

from __future__ import annotations

from types import MappingProxyType

from workgraph.tasks.model import Task

ROLE_KEYWORDS = MappingProxyType({
    # Management & planning
    "manager": ("management", "planning", "coordination", "leadership", "organization", "requirements", "strategy"),
    "product": ("product", "requirements", "planning", "strategy", "roadmap", "analysis", "features"),
    "pm": ("product", "requirements", "planning", "strategy", "management", "coordination"),
    "project": ("planning", "coordination", "management", "requirements", "organization"),
    "기획": ("planning", "requirements", "strategy", "product", "management", "analysis"),
    "planner": ("planning", "requirements", "strategy", "organization"),
    # Analysis
    "analyst": ("analysis", "research", "data", "insights", "reporting", "requirements"),
    "ba": ("analysis", "requirements", "planning", "business", "documentation"),
    "분석가": ("analysis", "research", "requirements", "insights"),
    # Development
    "developer": ("coding", "programming", "development", "technical", "implementation"),
    "engineer": ("coding", "programming", "development", "technical", "implementation", "architecture"),
    "frontend": ("frontend", "ui", "web", "javascript", "react", "css", "development"),
    "backend": ("backend", "server", "api", "database", "architecture", "development"),
    "fullstack": ("frontend", "backend", "web", "development", "full-stack"),
    "개발자": ("coding", "programming", "development", "technical", "implementation"),
    # Design
    "designer": ("design", "ui", "ux", "visual", "graphics", "creative"),
    "디자이너": ("design", "ui", "ux", "visual", "creative"),
    # Marketing & sales
    "marketing": ("marketing", "promotion", "content", "advertising", "communication"),
    "sales": ("sales", "business", "client", "revenue", "negotiation"),
    # QA
    "qa": ("testing", "quality", "validation", "verification", "bug"),
    "tester": ("testing", "quality", "qa", "validation"),
    # DevOps
    "devops": ("deployment", "infrastructure", "automation", "ci/cd", "operations"),
    "ops": ("operations", "deployment", "infrastructure", "maintenance"),
    # Data
    "data": ("data", "analytics", "analysis", "statistics", "insights"),
    # Writing
    "writer": ("writing", "content", "documentation", "communication", "creative"),
    "technical writer": ("writing", "documentation", "technical writing", "communication"),
})

TASK_KEYWORDS = MappingProxyType({
    # Design
    "design": ("design", "ui", "ux", "visual", "creative"),
    "디자인": ("design", "ui", "ux", "visual", "creative"),
    "ui": ("frontend", "ui", "design"),
    "ux": ("ux", "design", "user experience"),
    "인터페이스": ("frontend", "ui", "design"),
    "화면": ("frontend", "ui", "design"),
    # Development
    "code": ("coding", "programming", "development", "technical"),
    "develop": ("coding", "programming", "development", "technical"),
    "개발": ("coding", "programming", "development", "technical"),
    "implement": ("coding", "programming", "development", "technical", "implementation"),
    "구현": ("coding", "programming", "development", "technical", "implementation"),
    "프로그래밍": ("coding", "programming", "development", "technical"),
    # Testing
    "test": ("testing", "quality", "qa", "verification"),
    "테스트": ("testing", "quality", "qa", "verification"),
    "검증": ("testing", "quality", "qa", "verification"),
    "qa": ("testing", "quality", "qa", "verification"),
    # Documentation
    "write": ("writing", "content", "documentation", "communication"),
    "document": ("writing", "documentation", "technical writing"),
    "문서": ("writing", "documentation", "technical writing"),
    "작성": ("writing", "content", "documentation"),
    # Analysis
    "analyze": ("analysis", "data", "research", "insights"),
    "분석": ("analysis", "data", "research", "insights"),
    "research": ("research", "analysis", "investigation"),
    "조사": ("research", "analysis", "investigation"),
    "연구": ("research", "analysis", "investigation"),
    # Planning
    "plan": ("planning", "strategy", "organization", "management"),
    "계획": ("planning", "strategy", "organization", "management"),
    "기획": ("planning", "strategy", "organization", "management"),
    "manage": ("management", "coordination", "leadership"),
    "관리": ("management", "coordination", "leadership"),
    # Marketing
    "market": ("marketing", "promotion", "communication"),
    "마케팅": ("marketing", "promotion", "communication"),
    "홍보": ("marketing", "promotion", "communication"),
    # Deployment
    "deploy": ("deployment", "devops", "infrastructure"),
    "배포": ("deployment", "devops", "infrastructure"),
    "운영": ("deployment", "devops", "infrastructure", "operations"),
    "유지보수": ("maintenance", "operations", "support"),
    # Backend / API
    "api": ("backend", "api", "development"),
    "backend": ("backend", "server", "api"),
    "백엔드": ("backend", "server", "api"),
    "서버": ("backend", "server", "api"),
    "database": ("backend", "database", "data"),
    "데이터베이스": ("backend", "database", "data"),
    # Frontend
    "frontend": ("frontend", "ui", "web"),
    "프론트엔드": ("frontend", "ui", "web"),
    "웹": ("frontend", "web", "development"),
    # AI / ML
    "ai": ("ai", "machine learning", "data", "model"),
    "ml": ("machine learning", "ai", "data", "model"),
    "인공지능": ("ai", "machine learning", "data", "model"),
    "모델": ("ai", "machine learning", "data", "model"),
    "학습": ("machine learning", "ai", "training"),
    "머신러닝": ("machine learning", "ai", "data"),
    # Requirements
    "요구사항": ("analysis", "planning", "requirements", "management"),
    "정의": ("analysis", "planning", "requirements"),
    "기능": ("development", "implementation", "features"),
    # Integration
    "연동": ("integration", "api", "development", "backend"),
})

PLANNING_SKILLS = frozenset({"planning", "requirements", "analysis", "strategy", "management"})

# Fallback when no task keyword matches: first N words longer than M chars.
FALLBACK_WORD_COUNT = 5
FALLBACK_MIN_WORD_LEN = 4


def _match_keywords(text: str, table: MappingProxyType) -> set[str]:
    skills: set[str] = set()
    for keyword, tokens in table.items():
        if keyword in text:
            skills.update(tokens)
    return skills


def infer_skillset_from_role(role: str | None) -> frozenset[str]:
    """Skill tokens implied by a role label such as ``"Backend Engineer"``.

    Unknown roles become their own single token; an empty role has no skills.
    """
    role_lower = (role or "").strip().lower()
    if not role_lower:
        return frozenset()
    skills = _match_keywords(role_lower, ROLE_KEYWORDS)
    return frozenset(skills or {role_lower})


def infer_required_skillset(task: Task) -> frozenset[str]:
    """Skill tokens a task needs, from its name, description and outputs."""
    combined = task.text().lower()
    skills = _match_keywords(combined, TASK_KEYWORDS)
    if not skills:
        words = [w for w in combined.split() if len(w) >= FALLBACK_MIN_WORD_LEN]
        skills = set(words[:FALLBACK_WORD_COUNT])
    return frozenset(skills)


def is_planning_work(skills: frozenset[str]) -> bool:
    return not skills.isdisjoint(PLANNING_SKILLS)
