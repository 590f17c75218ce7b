# options.py
# Option catalogs rendered by the dashboard's prediction form. Inputs are not
# restricted to these values; unknown values fall back to neutral multipliers.

JOB_TITLE_OPTIONS: tuple[str, ...] = (
    "Software Engineer",
    "Senior Software Engineer",
    "Staff Software Engineer",
    "Engineering Manager",
    "Product Manager",
    "Senior Product Manager",
    "Data Scientist",
    "Senior Data Scientist",
    "DevOps Engineer",
    "QA Engineer",
    "UX Designer",
    "UI Designer",
    "Marketing Manager",
    "Digital Marketing Specialist",
    "Content Marketing Manager",
    "Sales Representative",
    "Account Manager",
    "Sales Manager",
    "Business Development Manager",
    "HR Generalist",
    "HR Manager",
    "Recruiter",
    "Financial Analyst",
    "Accountant",
    "Finance Manager",
    "Operations Manager",
    "Project Manager",
    "Scrum Master",
    "Customer Success Manager",
    "Technical Writer",
)

DEPARTMENT_OPTIONS: tuple[str, ...] = ("Engineering", "Marketing", "Sales", "HR", "Finance")

LOCATION_OPTIONS: tuple[str, ...] = ("New York", "San Francisco", "Los Angeles", "Chicago", "Remote")

EDUCATION_OPTIONS: tuple[str, ...] = ("Bachelor's", "Master's", "PhD", "Associate", "High School")

COMPANY_SIZE_OPTIONS: tuple[str, ...] = (
    "Startup (1-50)",
    "Medium (51-500)",
    "Large (501-5000)",
    "Enterprise (5000+)",
)
