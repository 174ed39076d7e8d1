"""Static detection tables.

The order of every table is significant: frameworks are reported in the
order their rules fire, and generated READMEs rely on that order.
"""

from typing import NamedTuple


class FileRule(NamedTuple):
    """Framework detected from top-level file names.

    Attributes:
        framework: Framework name reported when the rule fires
        files: File names the rule inspects
        require_all: True if every file must be present, False if any one suffices
    """

    framework: str
    files: tuple[str, ...]
    require_all: bool = False

    def matches(self, names: set[str]) -> bool:
        if self.require_all:
            return all(f in names for f in self.files)
        return any(f in names for f in self.files)


FILE_FRAMEWORK_RULES: tuple[FileRule, ...] = (
    FileRule("Angular", ("angular.json",)),
    FileRule("Vue.js", ("vue.config.js",)),
    FileRule("Next.js", ("next.config.js",)),
    FileRule("Gatsby", ("gatsby-config.js",)),
    FileRule("Nuxt.js", ("nuxt.config.js",)),
    FileRule("Svelte", ("svelte.config.js",)),
    FileRule("Remix", ("remix.config.js",)),
    FileRule("Django", ("django-admin.py", "manage.py")),
    FileRule("Ruby on Rails", ("Gemfile", "config.ru"), require_all=True),
    FileRule("Laravel", ("composer.json", "artisan"), require_all=True),
    FileRule("Java/Maven", ("pom.xml",)),
    FileRule("Java/Gradle", ("build.gradle",)),
    FileRule("Go", ("go.mod",)),
    FileRule("Rust", ("Cargo.toml",)),
    FileRule("Python", ("requirements.txt", "setup.py")),
    FileRule(".NET", (".csproj", ".sln")),
    FileRule("Docker", ("docker-compose.yml", "Dockerfile")),
)

DEPENDENCY_FRAMEWORKS: dict[str, str] = {
    "react": "React",
    "react-dom": "React",
    "express": "Express.js",
    "koa": "Koa.js",
    "fastify": "Fastify",
    "nest": "NestJS",
    "flask": "Flask",
    "django": "Django",
    "tensorflow": "TensorFlow",
    "pytorch": "PyTorch",
    "dotnet": ".NET",
    "electron": "Electron",
    "flutter": "Flutter",
    "react-native": "React Native",
}

CICD_MARKERS: frozenset[str] = frozenset(
    {
        ".github/workflows",
        ".gitlab-ci.yml",
        ".travis.yml",
        "Jenkinsfile",
        "azure-pipelines.yml",
        ".circleci/config.yml",
    }
)

DOCUMENTATION_MARKERS: frozenset[str] = frozenset(
    {
        "docs",
        "documentation",
        "wiki",
        "CONTRIBUTING.md",
        "CHANGELOG.md",
        "CODE_OF_CONDUCT.md",
    }
)

README_NAMES: frozenset[str] = frozenset({"readme.md", "readme"})

# Manifests tried in order; the first one present in the listing is used
MANIFEST_FILES: tuple[str, ...] = ("package.json", "requirements.txt")

LANGUAGE_COLORS: dict[str, str] = {
    "JavaScript": "F7DF1E",
    "TypeScript": "3178C6",
    "Python": "3776AB",
    "Java": "007396",
    "Go": "00ADD8",
    "Rust": "DEA584",
    "C++": "00599C",
    "C#": "239120",
    "PHP": "777BB4",
    "Ruby": "CC342D",
    "HTML": "E34F26",
    "CSS": "1572B6",
    "Shell": "4EAA25",
    "Dart": "0175C2",
    "Swift": "FA7343",
    "Kotlin": "7F52FF",
}

DEFAULT_LANGUAGE_COLOR = "555555"

MAX_RELEASES = 5
MAX_CONTRIBUTORS = 10
MAX_TOP_LANGUAGES = 3
README_REFERENCE_LIMIT = 1000
