"""One-time DB setup: create tables and seed a demo quiz plus accounts."""
from sqlalchemy import select

from quizdesk.core.security import hash_password
from quizdesk.db.models import Question, Quiz, RoleEnum, User
from quizdesk.db.session import Base, get_engine, session_scope

# (text, options A–D, correct option)
JAVA_BASICS = [
    ("Which keyword is used to inherit a class in Java?",
     ("extend", "extends", "inherit", "implements"), "B"),
    ("Which method is the entry point for a Java app?",
     ("start()", "main()", "run()", "init()"), "B"),
    ("Which collection does not allow duplicates?",
     ("List", "Set", "Map", "Queue"), "B"),
    ("What is JVM?",
     ("Java Virtual Machine", "Java Vendor Model", "Just Virtual Maker", "Java Variable Memory"), "A"),
    ("Which access modifier is most restrictive?",
     ("private", "protected", "public", "default"), "A"),
    ("Which keyword prevents method overriding?",
     ("final", "static", "const", "abstract"), "A"),
    ("Which package contains ArrayList?",
     ("java.util", "java.lang", "java.io", "java.net"), "A"),
]


def _ensure_user(db, username: str, password: str, full_name: str, role: RoleEnum) -> None:
    if db.scalars(select(User).where(User.username == username)).first():
        print(f"  User {username} already exists")
        return
    db.add(User(
        username=username,
        hashed_password=hash_password(password),
        full_name=full_name,
        role=role,
    ))
    print(f"✅ Created {role.value}: {username} / {password}")


def main() -> None:
    # 1. Create all tables
    Base.metadata.create_all(bind=get_engine())
    print("✅ All tables created")

    with session_scope() as db:
        # 2. Accounts
        _ensure_user(db, "demo", "demo123", "Demo User", RoleEnum.STUDENT)
        _ensure_user(db, "admin", "admin123", "Quiz Admin", RoleEnum.ADMIN)

        # 3. Demo quiz: 5 of 7 questions in 90 seconds
        if db.scalars(select(Quiz).where(Quiz.title == "Java Basics")).first():
            print("  Quiz 'Java Basics' already exists")
            return
        db.add(Quiz(
            title="Java Basics",
            total_questions=5,
            time_limit_seconds=90,
            active=True,
            questions=[
                Question(
                    text=text,
                    option_a=a, option_b=b, option_c=c, option_d=d,
                    correct_option=correct,
                    points=1,
                )
                for text, (a, b, c, d), correct in JAVA_BASICS
            ],
        ))
        print(f"✅ Created quiz 'Java Basics' with {len(JAVA_BASICS)} questions")


if __name__ == "__main__":
    main()
