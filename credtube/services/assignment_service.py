"""
Assignment Service

Quiz and assignment generation behind a pluggable interface.

The bundled TemplateQuizGenerator fills fixed question skeletons with the
video's title, subject and topic. It performs no content analysis and calls
no model. A model-backed generator can replace it by implementing
QuizGenerator.generate().
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from credtube.services.scoring import DEFAULT_PASSING_SCORE


TECHNICAL_KEYWORDS = (
    "programming",
    "coding",
    "software",
    "javascript",
    "python",
    "react",
    "algorithm",
    "data structure",
    "computer science",
    "development",
    "code",
    "function",
    "variable",
    "loop",
    "array",
    "object",
)


@dataclass(frozen=True)
class GenerationContext:
    """What a generator knows about the video it writes a quiz for."""
    video_title: str
    video_description: str = ""
    difficulty: str = "intermediate"
    guest_mode: bool = False
    subject: str = ""
    topic: str = ""


@dataclass
class QuizDraft:
    """Generated quiz plus the practical and reflection parts of an assignment."""
    title: str
    questions: List[Dict[str, Any]]
    passing_score: int = DEFAULT_PASSING_SCORE
    practical_tasks: List[Dict[str, str]] = field(default_factory=list)
    reflection_questions: List[str] = field(default_factory=list)

    def to_assignment(self) -> Dict[str, Any]:
        return {
            "quiz": {
                "title": self.title,
                "questions": self.questions,
                "passingScore": self.passing_score,
            },
            "practical": {"tasks": self.practical_tasks},
            "reflection": {"questions": self.reflection_questions},
        }


class QuizGenerator(Protocol):
    def generate(self, context: GenerationContext) -> QuizDraft:
        ...


def is_technical(context: GenerationContext) -> bool:
    """True if any technical keyword appears in the title, description, subject or topic."""
    fields = (
        context.video_title,
        context.video_description,
        context.subject,
        context.topic,
    )
    return any(
        keyword in text.lower()
        for keyword in TECHNICAL_KEYWORDS
        for text in fields
    )


class TemplateQuizGenerator:
    """Fills canned question, task and reflection templates."""

    def generate(self, context: GenerationContext) -> QuizDraft:
        technical = is_technical(context)
        return QuizDraft(
            title=f"Progressive Assessment: {context.video_title}",
            questions=self._questions(context, technical),
            passing_score=DEFAULT_PASSING_SCORE,
            practical_tasks=self._practical_tasks(context, technical),
            reflection_questions=self._reflection_questions(context),
        )

    def _questions(self, context: GenerationContext, technical: bool) -> List[Dict[str, Any]]:
        title = context.video_title
        topic = context.topic
        related = f" related to {context.subject}" if context.subject else ""

        basic = {
            "level": "basic",
            "question": f'What is the main concept covered in "{title}"{related}?',
            "options": [
                f"The core {topic or 'concept'} explained in the video",
                "General background information only",
                "Introductory examples without depth",
                "Unrelated supplementary material",
            ],
            "correct": 0,
            "explanation": (
                f"This question tests basic comprehension of the main "
                f"{topic or 'concept'} presented in the video content."
            ),
        }
        intermediate = {
            "level": "intermediate",
            "question": (
                f'How would you apply the {topic or "concepts"} from "{title}" '
                "in a practical scenario?"
            ),
            "options": [
                f"Implement the {topic or 'concepts'} in real-world applications with proper methodology",
                "Memorize the theoretical aspects without practical application",
                "Use only the basic examples shown in the video",
                "Apply concepts without understanding the underlying principles",
            ],
            "correct": 0,
            "explanation": (
                f"This question evaluates your ability to apply {topic or 'the concepts'} "
                "practically, moving beyond basic understanding."
            ),
        }
        advanced = {
            "level": "advanced",
            "question": (
                "What are the key challenges and considerations when implementing "
                f"{topic or 'these concepts'} in complex scenarios?"
            ),
            "options": [
                "Understanding edge cases, scalability, and integration challenges",
                "Only following the exact steps shown in the video",
                "Ignoring potential complications and edge cases",
                "Applying concepts without considering context or constraints",
            ],
            "correct": 0,
            "explanation": (
                "This question tests advanced understanding and critical thinking "
                "about real-world implementation challenges."
            ),
        }

        if technical:
            final = {
                "level": "final",
                "type": "coding",
                "question": (
                    f'[CODING CHALLENGE] Based on the concepts in "{title}", write a '
                    "solution that demonstrates your understanding:"
                ),
                "options": [
                    "Implement a well-structured solution with proper logic and best practices",
                    "Copy code examples directly without understanding",
                    "Write pseudo-code without actual implementation",
                    "Provide only theoretical explanation without code",
                ],
                "correct": 0,
                "explanation": (
                    "This coding challenge tests your ability to implement the concepts "
                    "practically and demonstrates mastery of the technical content."
                ),
            }
        else:
            final = {
                "level": "final",
                "type": "written",
                "question": (
                    f'[WRITTEN ASSESSMENT] Provide a comprehensive analysis of how the '
                    f'concepts from "{title}" can be applied in your field or area of interest:'
                ),
                "options": [
                    "Detailed analysis with specific examples, benefits, and implementation strategies",
                    "Basic summary of video content without analysis",
                    "General statements without specific application",
                    "Theoretical discussion without practical relevance",
                ],
                "correct": 0,
                "explanation": (
                    "This written assessment evaluates your ability to synthesize and "
                    "apply the concepts in meaningful ways."
                ),
            }

        return [basic, intermediate, advanced, final]

    def _practical_tasks(self, context: GenerationContext, technical: bool) -> List[Dict[str, str]]:
        title = context.video_title
        topic = context.topic

        if technical:
            first = {
                "task": "Code Implementation Challenge",
                "instructions": (
                    f"Create a working implementation that demonstrates the "
                    f'{topic or "programming concepts"} from "{title}". Include proper '
                    "error handling, comments, and follow best practices."
                ),
                "expectedOutcome": (
                    "A complete, functional code solution with clear documentation "
                    "and proper implementation of the concepts"
                ),
            }
        else:
            first = {
                "task": "Practical Application Project",
                "instructions": (
                    f"Design a project or scenario where you would apply the "
                    f'{topic or "concepts"} from "{title}" in your professional or '
                    "academic context."
                ),
                "expectedOutcome": (
                    "A detailed project plan with specific steps, expected outcomes, "
                    "and success metrics"
                ),
            }

        analysis = {
            "task": "Critical Analysis Report",
            "instructions": (
                "Write a 300-500 word analysis discussing the strengths, limitations, "
                f'and potential improvements of the approach presented in "{title}".'
            ),
            "expectedOutcome": (
                "A well-structured analytical report demonstrating critical thinking "
                "and deep understanding"
            ),
        }
        return [first, analysis]

    def _reflection_questions(self, context: GenerationContext) -> List[str]:
        title = context.video_title
        return [
            f"What specific insights about {context.topic or 'the subject matter'} did you "
            f'gain from "{title}" that you didn\'t know before?',
            "How do the concepts from this video connect to or challenge your existing "
            f"knowledge in {context.subject or 'this field'}?",
            "What questions or areas for further exploration emerged while watching this content?",
            "How will you integrate these new concepts into your current projects, studies, "
            "or professional work?",
            "What would you teach someone else as the most important takeaway from this "
            "learning experience?",
        ]


_default_generator: QuizGenerator = TemplateQuizGenerator()


def get_quiz_generator() -> QuizGenerator:
    return _default_generator


def generate_assignment(
    context: GenerationContext,
    generator: Optional[QuizGenerator] = None,
) -> Dict[str, Any]:
    """
    Produce a full assignment for a video.

    Returns:
        {"success": True, "assignment": {"quiz", "practical", "reflection"}}
    """
    draft = (generator or get_quiz_generator()).generate(context)
    return {"success": True, "assignment": draft.to_assignment()}
