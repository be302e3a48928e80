"""One-time DB setup: create tables and seed the lesson catalog."""
from sqlalchemy import select

from webculus.db.session import Base, get_engine, get_session_factory
from webculus.db.models import (
    DifficultyLevelEnum,
    Lesson,
    PracticeProblem,
    ProblemDifficultyEnum,
    User,
)
from webculus.core.security import hash_password

LESSONS = [
    {
        "slug": "linear-equations",
        "title": "Linear Equations with 2 Variables",
        "description": "Solve systems by substitution, elimination and graphing.",
        "difficulty_level": DifficultyLevelEnum.BEGINNER,
        "problems": [
            ("Solve: x + y = 5 and x - y = 1", ["x = 3, y = 2", "x = 2, y = 3", "x = 4, y = 1", "x = 1, y = 4"],
             "x = 3, y = 2", "Add both equations: 2x = 6, so x = 3 and y = 2.", "Elimination"),
            ("What is the slope of 2x + y = 4?", ["2", "-2", "4", "1/2"],
             "-2", "Rewrite as y = -2x + 4.", "Slope"),
            ("How many solutions does x + y = 2, 2x + 2y = 4 have?", ["None", "One", "Infinitely many", "Two"],
             "Infinitely many", "The second equation is the first one doubled.", "Consistency"),
        ],
    },
    {
        "slug": "linear-inequalities",
        "title": "Linear Inequalities with 2 Variables",
        "description": "Graph half-planes and find feasible regions.",
        "difficulty_level": DifficultyLevelEnum.BEGINNER,
        "problems": [
            ("Which point satisfies y > 2x + 1?", ["(0, 0)", "(1, 4)", "(2, 3)", "(-1, -2)"],
             "(1, 4)", "4 > 2(1) + 1 = 3.", "Half-planes"),
            ("The boundary of y ≤ x - 3 is drawn as", ["a dashed line", "a solid line", "a parabola", "no line"],
             "a solid line", "≤ includes the boundary.", "Boundaries"),
        ],
    },
    {
        "slug": "nonlinear-systems",
        "title": "Non-Linear Systems with 2 Variables",
        "description": "Intersections of lines, parabolas and circles.",
        "difficulty_level": DifficultyLevelEnum.INTERMEDIATE,
        "problems": [
            ("Solve: y = x² and y = 4", ["x = 2", "x = ±2", "x = 4", "x = ±4"],
             "x = ±2", "x² = 4 gives x = 2 or x = -2.", "Substitution"),
            ("How many times can a line meet a circle at most?", ["1", "2", "3", "4"],
             "2", "A line and a circle intersect in at most two points.", "Intersections"),
        ],
    },
    {
        "slug": "calculus-applications",
        "title": "Calculus Applications with 2 Variables",
        "description": "Optimisation and rates of change on two-variable models.",
        "difficulty_level": DifficultyLevelEnum.ADVANCED,
        "problems": [
            ("Where is the vertex of f(x) = x² + 2x - 3?", ["x = -1", "x = 1", "x = -3", "x = 3"],
             "x = -1", "f'(x) = 2x + 2 = 0 at x = -1.", "Optimisation"),
            ("What is f'(x) for f(x) = 3x²?", ["3x", "6x", "6", "x³"],
             "6x", "Power rule: d/dx 3x² = 6x.", "Derivatives"),
        ],
    },
]

# 1. Create all tables
engine = get_engine()
Base.metadata.create_all(bind=engine)
print("All tables created")

session_factory = get_session_factory()
with session_factory() as db:
    # 2. Lesson catalog + practice problems
    for order, entry in enumerate(LESSONS, start=1):
        lesson = db.scalars(select(Lesson).where(Lesson.slug == entry["slug"])).first()
        if lesson:
            print(f"  Lesson {entry['slug']} already exists")
            continue
        lesson = Lesson(
            slug=entry["slug"],
            title=entry["title"],
            description=entry["description"],
            difficulty_level=entry["difficulty_level"],
            order_index=order,
        )
        for idx, (question, choices, answer, explanation, topic) in enumerate(entry["problems"], start=1):
            lesson.problems.append(
                PracticeProblem(
                    question=question,
                    choices=choices,
                    correct_answer=answer,
                    explanation=explanation,
                    topic=topic,
                    difficulty=ProblemDifficultyEnum.EASY if idx == 1 else ProblemDifficultyEnum.MEDIUM,
                    order_index=idx,
                )
            )
        db.add(lesson)
        db.commit()
        print(f"Created lesson {entry['slug']} with {len(entry['problems'])} problems")

    # 3. Test learner
    student = db.scalars(select(User).where(User.email == "student@example.com")).first()
    if not student:
        db.add(
            User(
                email="student@example.com",
                hashed_password=hash_password("student123"),
                name="Student User",
            )
        )
        db.commit()
        print("Created student: student@example.com / student123")
    else:
        print("  Student user already exists")

print("\nDatabase is ready to use!")
