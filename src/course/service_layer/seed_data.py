"""Reference catalog data written by ``course server seed``.

The data is deterministic: running the seeder repeatedly converges on exactly
these rows. Categories must precede the courses that reference them.
"""

from course.domain.catalog import Category, Course, CourseLevel

CATEGORIES: tuple[Category, ...] = (
    Category("PROG", "Programming", "General-purpose programming languages."),
    Category("DATA", "Data Engineering", "Pipelines, warehouses and data quality."),
    Category("WEB", "Web Development", "Frontend and backend web applications."),
    Category("OPS", "Operations", "Deployment, observability and reliability."),
    Category("SEC", "Security", "Application and infrastructure security."),
    Category("DES", "Design", "Product and interaction design."),
)

COURSES: tuple[Course, ...] = (
    Course("PY-101", "PROG", "Python Foundations", CourseLevel.BEGINNER, 4900,
           summary="Syntax, data structures and the standard library.", capacity=40),
    Course("PY-201", "PROG", "Idiomatic Python", CourseLevel.INTERMEDIATE, 7900,
           summary="Iterators, context managers and packaging.", capacity=30),
    Course("GO-101", "PROG", "Go for Backend Developers", CourseLevel.BEGINNER, 5900,
           capacity=30),
    Course("RS-301", "PROG", "Systems Programming in Rust", CourseLevel.ADVANCED, 9900,
           capacity=20),
    Course("SQL-101", "DATA", "SQL Essentials", CourseLevel.BEGINNER, 3900,
           summary="Queries, joins and aggregation.", capacity=50),
    Course("DWH-201", "DATA", "Modelling a Data Warehouse", CourseLevel.INTERMEDIATE, 8900,
           capacity=25),
    Course("STR-301", "DATA", "Stream Processing", CourseLevel.ADVANCED, 10900,
           capacity=20),
    Course("HTML-101", "WEB", "HTML and CSS from Scratch", CourseLevel.BEGINNER, 2900,
           capacity=60),
    Course("API-201", "WEB", "Designing HTTP APIs", CourseLevel.INTERMEDIATE, 6900,
           summary="Resources, versioning and error contracts.", capacity=30),
    Course("K8S-201", "OPS", "Kubernetes in Practice", CourseLevel.INTERMEDIATE, 9900,
           capacity=25),
    Course("OBS-301", "OPS", "Observability Engineering", CourseLevel.ADVANCED, 9900,
           capacity=20),
    Course("SEC-101", "SEC", "Secure Coding Basics", CourseLevel.BEGINNER, 4900,
           capacity=40),
    Course("SEC-301", "SEC", "Threat Modelling", CourseLevel.ADVANCED, 11900,
           capacity=15),
    Course("UX-101", "DES", "User Research Fundamentals", CourseLevel.BEGINNER, 3900,
           capacity=35),
)
