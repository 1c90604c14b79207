"""
Fixed lookup tables used by repository analysis, profile building and matching.

Everything here is plain data. The tables are read once at import time and
never mutated; ``validate_tables`` checks that they stay consistent with each
other.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional


# ---------------------------------------------------------------------------
# Directory walking
# ---------------------------------------------------------------------------

IGNORED_DIRS: frozenset[str] = frozenset({
    "node_modules",
    "dist",
    "build",
    "coverage",
    "vendor",
    "__pycache__",
    "target",
})

VCS_MARKERS: tuple[str, ...] = (".git",)


# ---------------------------------------------------------------------------
# Languages
# ---------------------------------------------------------------------------

EXTENSION_LANGUAGES: Mapping[str, str] = MappingProxyType({
    ".js": "JavaScript",
    ".mjs": "JavaScript",
    ".cjs": "JavaScript",
    ".jsx": "JavaScript (React)",
    ".ts": "TypeScript",
    ".tsx": "TypeScript (React)",
    ".py": "Python",
    ".rb": "Ruby",
    ".go": "Go",
    ".rs": "Rust",
    ".java": "Java",
    ".kt": "Kotlin",
    ".swift": "Swift",
    ".c": "C",
    ".cpp": "C++",
    ".cc": "C++",
    ".h": "C/C++ Header",
    ".cs": "C#",
    ".php": "PHP",
    ".html": "HTML",
    ".htm": "HTML",
    ".css": "CSS",
    ".scss": "SCSS",
    ".sass": "Sass",
    ".less": "Less",
    ".vue": "Vue",
    ".svelte": "Svelte",
    ".sql": "SQL",
    ".sh": "Shell",
    ".bash": "Bash",
    ".zsh": "Zsh",
    ".ps1": "PowerShell",
    ".md": "Markdown",
    ".json": "JSON",
    ".yaml": "YAML",
    ".yml": "YAML",
    ".toml": "TOML",
    ".xml": "XML",
    ".lua": "Lua",
    ".r": "R",
    ".scala": "Scala",
    ".ex": "Elixir",
    ".exs": "Elixir",
    ".erl": "Erlang",
    ".clj": "Clojure",
    ".hs": "Haskell",
    ".elm": "Elm",
    ".dart": "Dart",
    ".sol": "Solidity",
})


@dataclass(frozen=True)
class LanguageInfo:
    """How a detected language is presented in a skills profile."""
    level: str = "language"  # language, markup, styling, framework
    aliases: tuple[str, ...] = ()
    parent: Optional[str] = None


DEFAULT_LANGUAGE_INFO = LanguageInfo()

LANGUAGE_SKILLS: Mapping[str, LanguageInfo] = MappingProxyType({
    "JavaScript": LanguageInfo(aliases=("js", "node", "nodejs")),
    "JavaScript (React)": LanguageInfo(parent="JavaScript"),
    "TypeScript": LanguageInfo(aliases=("ts",)),
    "TypeScript (React)": LanguageInfo(parent="TypeScript"),
    "Python": LanguageInfo(aliases=("py", "python3")),
    "Go": LanguageInfo(aliases=("golang",)),
    "Rust": LanguageInfo(aliases=("rs",)),
    "Java": LanguageInfo(),
    "C#": LanguageInfo(aliases=("csharp", "dotnet")),
    "C": LanguageInfo(),
    "C++": LanguageInfo(aliases=("cpp",)),
    "Ruby": LanguageInfo(aliases=("rb",)),
    "PHP": LanguageInfo(),
    "Swift": LanguageInfo(),
    "Kotlin": LanguageInfo(),
    "Scala": LanguageInfo(),
    "Elixir": LanguageInfo(),
    "Haskell": LanguageInfo(),
    "Lua": LanguageInfo(),
    "SQL": LanguageInfo(),
    "Shell": LanguageInfo(aliases=("bash", "sh")),
    "HTML": LanguageInfo(level="markup"),
    "CSS": LanguageInfo(level="styling"),
    "SCSS": LanguageInfo(level="styling", parent="CSS"),
    "Sass": LanguageInfo(level="styling", parent="CSS"),
    "Vue": LanguageInfo(level="framework"),
    "Svelte": LanguageInfo(level="framework"),
})

LANGUAGE_LEVELS: tuple[str, ...] = ("language", "markup", "styling", "framework")


def language_info(name: str) -> LanguageInfo:
    """Return presentation info for a language, defaulting to a plain language."""
    return LANGUAGE_SKILLS.get(name, DEFAULT_LANGUAGE_INFO)


# ---------------------------------------------------------------------------
# File categories
# ---------------------------------------------------------------------------

CODE_EXTENSIONS: frozenset[str] = frozenset({
    ".js", ".ts", ".jsx", ".tsx", ".py", ".rb", ".go", ".rs", ".java",
    ".c", ".cpp", ".cs", ".php", ".vue", ".svelte",
})
CONFIG_EXTENSIONS: frozenset[str] = frozenset({
    ".json", ".yaml", ".yml", ".toml", ".xml", ".env", ".ini",
})
DOC_EXTENSIONS: frozenset[str] = frozenset({".md", ".txt", ".rst", ".adoc"})
ASSET_EXTENSIONS: frozenset[str] = frozenset({
    ".png", ".jpg", ".jpeg", ".gif", ".svg", ".ico", ".webp",
    ".mp3", ".mp4", ".wav", ".ogg",
})

# Checked in order; the first category containing the extension wins.
FILE_CATEGORIES: tuple[tuple[str, frozenset[str]], ...] = (
    ("code", CODE_EXTENSIONS),
    ("config", CONFIG_EXTENSIONS),
    ("docs", DOC_EXTENSIONS),
    ("assets", ASSET_EXTENSIONS),
)


def file_category(extension: str) -> Optional[str]:
    """Return the file category for a lower-cased extension, if any."""
    for category, extensions in FILE_CATEGORIES:
        if extension in extensions:
            return category
    return None


# ---------------------------------------------------------------------------
# Dependency manifests
# ---------------------------------------------------------------------------

# ecosystem -> manifest file name at the repository root
ECOSYSTEM_MANIFESTS: Mapping[str, str] = MappingProxyType({
    "npm": "package.json",
    "python": "requirements.txt",
    "rust": "Cargo.toml",
    "go": "go.mod",
})


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

# (relative path, pattern tag), checked for existence in this order
PATH_PATTERNS: tuple[tuple[str, str], ...] = (
    ("tests", "testing"),
    ("__tests__", "testing"),
    ("test", "testing"),
    ("spec", "testing"),
    (".github/workflows", "ci-cd"),
    (".gitlab-ci.yml", "ci-cd"),
    ("Dockerfile", "docker"),
    ("docker-compose.yml", "docker"),
    ("kubernetes", "kubernetes"),
    ("k8s", "kubernetes"),
    ("terraform", "infrastructure-as-code"),
    (".terraform", "infrastructure-as-code"),
    ("src/components", "component-architecture"),
    ("components", "component-architecture"),
    ("src/api", "api-development"),
    ("api", "api-development"),
    ("routes", "api-development"),
    ("migrations", "database-migrations"),
    ("prisma", "orm"),
    ("models", "mvc"),
    ("controllers", "mvc"),
    ("views", "mvc"),
    ("public", "static-assets"),
    ("static", "static-assets"),
    ("assets", "static-assets"),
    ("docs", "documentation"),
    ("storybook", "design-system"),
    (".storybook", "design-system"),
    ("cypress", "e2e-testing"),
    ("e2e", "e2e-testing"),
    ("playwright", "e2e-testing"),
    ("src/hooks", "react-hooks"),
    ("hooks", "react-hooks"),
    ("src/store", "state-management"),
    ("store", "state-management"),
    ("redux", "state-management"),
    ("graphql", "graphql"),
    ("schema.graphql", "graphql"),
    ("game", "game-development"),
    ("phaser", "game-development"),
    ("unity", "game-development"),
)

# dependency base name (scope stripped, lower-case) -> pattern tag
DEPENDENCY_PATTERNS: Mapping[str, str] = MappingProxyType({
    # npm
    "react": "react",
    "vue": "vue",
    "angular": "angular",
    "svelte": "svelte",
    "next": "nextjs",
    "nuxt": "nuxt",
    "gatsby": "gatsby",
    "express": "nodejs-backend",
    "fastify": "nodejs-backend",
    "koa": "nodejs-backend",
    "nest": "nestjs",
    "nestjs": "nestjs",
    "prisma": "orm",
    "sequelize": "orm",
    "typeorm": "orm",
    "mongoose": "mongodb",
    "phaser": "game-development",
    "pixi.js": "game-development",
    "three": "3d-graphics",
    "d3": "data-visualization",
    "chart.js": "data-visualization",
    "electron": "desktop-app",
    "react-native": "mobile-app",
    "expo": "mobile-app",
    "jest": "testing",
    "mocha": "testing",
    "vitest": "testing",
    "webpack": "bundling",
    "vite": "bundling",
    "rollup": "bundling",
    "eslint": "linting",
    "prettier": "code-formatting",
    "typescript": "typescript",
    "tailwindcss": "tailwind",
    "styled-components": "css-in-js",
    "emotion": "css-in-js",
    # python
    "pytest": "testing",
    "sqlalchemy": "orm",
    "alembic": "database-migrations",
    "pymongo": "mongodb",
    "matplotlib": "data-visualization",
    "plotly": "data-visualization",
    "pygame": "game-development",
    "graphene": "graphql",
    # rust
    "bevy": "game-development",
    "diesel": "orm",
    # go
    "gorm.io": "orm",
})


def dependency_base_name(dependency: str) -> str:
    """Strip an npm scope marker and sub-path: ``@nestjs/core`` -> ``nestjs``."""
    return dependency.lower().lstrip("@").split("/")[0]


# ---------------------------------------------------------------------------
# Frameworks and domains
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FrameworkInfo:
    """Display metadata for a pattern that counts as a framework or tool."""
    category: str
    name: str
    weight: float = 1.0


FRAMEWORK_CATEGORIES: Mapping[str, FrameworkInfo] = MappingProxyType({
    # Frontend
    "react": FrameworkInfo("frontend", "React", 1.5),
    "vue": FrameworkInfo("frontend", "Vue.js", 1.3),
    "angular": FrameworkInfo("frontend", "Angular", 1.3),
    "svelte": FrameworkInfo("frontend", "Svelte", 1.2),
    "nextjs": FrameworkInfo("frontend", "Next.js", 1.4),
    "nuxt": FrameworkInfo("frontend", "Nuxt.js", 1.3),
    "gatsby": FrameworkInfo("frontend", "Gatsby", 1.2),
    # Backend
    "nodejs-backend": FrameworkInfo("backend", "Node.js Backend", 1.4),
    "nestjs": FrameworkInfo("backend", "NestJS", 1.3),
    # Database
    "mongodb": FrameworkInfo("database", "MongoDB", 1.2),
    "orm": FrameworkInfo("database", "ORM", 1.3),
    "database-migrations": FrameworkInfo("database", "Database Migrations", 1.1),
    # DevOps
    "docker": FrameworkInfo("devops", "Docker", 1.4),
    "kubernetes": FrameworkInfo("devops", "Kubernetes", 1.5),
    "ci-cd": FrameworkInfo("devops", "CI/CD", 1.3),
    "infrastructure-as-code": FrameworkInfo("devops", "Infrastructure as Code", 1.4),
    # Testing
    "testing": FrameworkInfo("quality", "Testing", 1.2),
    "e2e-testing": FrameworkInfo("quality", "E2E Testing", 1.3),
    # Specialty
    "game-development": FrameworkInfo("specialty", "Game Development", 1.5),
    "3d-graphics": FrameworkInfo("specialty", "3D Graphics", 1.4),
    "data-visualization": FrameworkInfo("specialty", "Data Visualization", 1.3),
    "desktop-app": FrameworkInfo("specialty", "Desktop Apps (Electron)", 1.3),
    "mobile-app": FrameworkInfo("specialty", "Mobile Development", 1.4),
    "graphql": FrameworkInfo("api", "GraphQL", 1.3),
    # Architecture
    "component-architecture": FrameworkInfo("architecture", "Component Architecture", 1.1),
    "api-development": FrameworkInfo("architecture", "API Development", 1.3),
    "mvc": FrameworkInfo("architecture", "MVC Pattern", 1.1),
    "state-management": FrameworkInfo("architecture", "State Management", 1.2),
    "react-hooks": FrameworkInfo("architecture", "React Hooks", 1.1),
    # Styling
    "tailwind": FrameworkInfo("styling", "Tailwind CSS", 1.2),
    "css-in-js": FrameworkInfo("styling", "CSS-in-JS", 1.1),
    # Tooling
    "typescript": FrameworkInfo("tooling", "TypeScript", 1.4),
    "bundling": FrameworkInfo("tooling", "Build Tools", 1.1),
    "linting": FrameworkInfo("tooling", "Code Quality", 1.0),
})

PATTERN_DOMAINS: Mapping[str, str] = MappingProxyType({
    "game-development": "Game Development",
    "3d-graphics": "3D Graphics & Visualization",
    "data-visualization": "Data Visualization",
    "mobile-app": "Mobile Development",
    "desktop-app": "Desktop Applications",
    "api-development": "API & Backend Services",
    "kubernetes": "Cloud Infrastructure",
    "docker": "DevOps",
    "ci-cd": "DevOps",
    "infrastructure-as-code": "Cloud Infrastructure",
    "testing": "Quality Assurance",
    "e2e-testing": "Quality Assurance",
})

CATEGORY_DOMAINS: Mapping[str, str] = MappingProxyType({
    "frontend": "Frontend Development",
    "backend": "Backend Development",
    "database": "Database & Data",
    "devops": "DevOps",
    "specialty": "Specialized Development",
})


# ---------------------------------------------------------------------------
# Proficiency
# ---------------------------------------------------------------------------

# (minimum ratio, tier), highest first; a ratio equal to a boundary takes that tier
PROFICIENCY_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (0.5, "expert"),
    (0.3, "advanced"),
    (0.15, "intermediate"),
)
LOWEST_PROFICIENCY = "familiar"


# ---------------------------------------------------------------------------
# Job description keywords
# ---------------------------------------------------------------------------

DESCRIPTION_SKILL_PATTERNS: tuple[str, ...] = (
    r"\b(javascript|typescript|python|go|golang|rust|java|c\+\+|c#|ruby|php|swift|kotlin)\b",
    r"\b(react|vue|angular|svelte|next\.?js|nuxt|gatsby)\b",
    r"\b(node\.?js|express|fastify|nest\.?js|django|flask|rails|spring)\b",
    r"\b(postgresql|postgres|mysql|mongodb|redis|elasticsearch|dynamodb)\b",
    r"\b(aws|azure|gcp|google cloud|docker|kubernetes|k8s|terraform)\b",
    r"\b(git|github|gitlab|jira|figma|sketch)\b",
)


def known_patterns() -> set[str]:
    """Every pattern tag the analyzer can emit."""
    return {tag for _, tag in PATH_PATTERNS} | set(DEPENDENCY_PATTERNS.values())


def validate_tables() -> list[str]:
    """
    Check the lookup tables against each other.

    Returns:
        A list of human-readable issues; empty when the tables are consistent.
    """
    issues = []
    emitted = known_patterns()

    for pattern in FRAMEWORK_CATEGORIES:
        if pattern not in emitted:
            issues.append(f"framework pattern never emitted: {pattern}")

    for pattern in PATTERN_DOMAINS:
        if pattern not in emitted:
            issues.append(f"domain pattern never emitted: {pattern}")

    for name, info in LANGUAGE_SKILLS.items():
        if info.level not in LANGUAGE_LEVELS:
            issues.append(f"unknown level {info.level!r} for {name}")
        if info.parent and info.parent not in LANGUAGE_SKILLS:
            issues.append(f"unknown parent {info.parent!r} for {name}")

    seen: dict[str, str] = {}
    for category, extensions in FILE_CATEGORIES:
        for ext in extensions:
            if ext in seen:
                issues.append(f"{ext} is both {seen[ext]} and {category}")
            seen[ext] = category

    weights = [info.weight for info in FRAMEWORK_CATEGORIES.values()]
    if weights and (min(weights) < 1.0 or max(weights) > 1.5):
        issues.append("framework weights must stay within 1.0-1.5")

    return issues
