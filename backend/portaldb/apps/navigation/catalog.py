"""
Static navigation catalog.

Links are declared per group; priority is the group's base priority plus the
link's position within the group, so declaration order is display order.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from portaldb.apps.accounts.models import PlatformRole

from .schemas import NavGroup, NavLink

R = PlatformRole

INSTRUCTOR_ROLES = (R.INSTRUCTOR, R.ADMIN, R.CHAPTER_LEAD)
MENTOR_ROLES = (R.MENTOR, R.CHAPTER_LEAD, R.ADMIN)
APPLICANT_ROLES = (R.STUDENT, R.INSTRUCTOR, R.STAFF, R.ADMIN)
ADMIN_ONLY = (R.ADMIN,)
PARENT_ONLY = (R.PARENT,)
STUDENT_ONLY = (R.STUDENT,)
CHAPTER_LEAD_ONLY = (R.CHAPTER_LEAD,)


def _group_links(group: NavGroup, base_priority: int, links: Sequence[Dict]) -> List[NavLink]:
    return [
        NavLink(group=group, priority=base_priority + index, **link)
        for index, link in enumerate(links)
    ]


NAV_CATALOG: List[NavLink] = [
    *_group_links(NavGroup.FAMILY, 100, [
        dict(href="/parent", label="Parent Portal", icon="🏠", roles=PARENT_ONLY),
        dict(href="/parent/resources", label="Resources", icon="📚", roles=PARENT_ONLY),
    ]),
    *_group_links(NavGroup.MAIN, 200, [
        dict(href="/", label="Overview", icon="▣"),
        dict(href="/world", label="Passion World", icon="🌍"),
        dict(href="/announcements", label="Announcements", icon="📢"),
        dict(href="/notifications", label="Notifications", icon="🔔", badge_key="notifications"),
        dict(href="/messages", label="Messages", icon="✉", badge_key="messages"),
        dict(href="/feedback/anonymous", label="Anonymous Feedback", icon="💬"),
    ]),
    *_group_links(NavGroup.LEARNING, 300, [
        dict(href="/pathways", label="Pathways", icon="🗺"),
        dict(href="/curriculum", label="Courses", icon="📖"),
        dict(href="/classes/catalog", label="Class Catalog", icon="📋"),
        dict(href="/my-courses", label="My Courses", icon="🎓", roles=STUDENT_ONLY),
        dict(href="/classes/schedule", label="My Schedule", icon="📅", roles=STUDENT_ONLY),
        dict(href="/courses/recommended", label="Recommended", icon="⭐", roles=STUDENT_ONLY),
        dict(href="/learn/modules", label="Modules", icon="📦", roles=STUDENT_ONLY),
        dict(href="/learn/workshops", label="Workshops", icon="🔧", roles=STUDENT_ONLY),
        dict(href="/learn/style-quiz", label="Style Quiz", icon="🧩", roles=STUDENT_ONLY),
        dict(href="/learn/challenges", label="Challenge Learning", icon="⚡", roles=STUDENT_ONLY),
        dict(href="/learn/practice", label="Practice Log", icon="🏋", roles=STUDENT_ONLY),
        dict(href="/learn/progress", label="My Progress", icon="📈", roles=STUDENT_ONLY),
        dict(href="/programs", label="Programs", icon="🎯"),
    ]),
    *_group_links(NavGroup.GROWTH, 400, [
        dict(href="/goals", label="My Goals", icon="🎯"),
        dict(href="/analytics", label="Analytics", icon="📊", roles=STUDENT_ONLY),
        dict(href="/learn/path-generator", label="Learning Paths", icon="🧭", roles=STUDENT_ONLY),
        dict(href="/pathways/progress", label="Pathway Progress", icon="📈", roles=STUDENT_ONLY),
        dict(href="/projects/tracker", label="Project Tracker", icon="📝", roles=STUDENT_ONLY),
        dict(href="/motivation", label="Motivation", icon="🔥", roles=STUDENT_ONLY),
        dict(href="/reflections/streaks", label="Reflection Streaks", icon="🔗", roles=STUDENT_ONLY),
        dict(href="/reflection", label="Monthly Reflection", icon="📝", roles=(R.INSTRUCTOR, R.CHAPTER_LEAD)),
        dict(href="/instructor-training", label="Instructor Training", icon="🎓", roles=INSTRUCTOR_ROLES),
        dict(href="/lesson-plans", label="Lesson Plans", icon="📋", roles=INSTRUCTOR_ROLES),
        dict(href="/instructor/lesson-plans/templates", label="Plan Templates", icon="📄", roles=INSTRUCTOR_ROLES),
        dict(href="/instructor/curriculum-builder", label="Curriculum Builder", icon="🛠", roles=INSTRUCTOR_ROLES),
        dict(href="/instructor/class-settings", label="Class Settings", icon="⚙", roles=INSTRUCTOR_ROLES),
        dict(href="/instructor/peer-observation", label="Peer Observation", icon="👁", roles=INSTRUCTOR_ROLES),
        dict(href="/instructor/mentee-health", label="Mentee Health", icon="💚", roles=INSTRUCTOR_ROLES),
    ]),
    *_group_links(NavGroup.CHALLENGES, 500, [
        dict(href="/challenges", label="Challenges", icon="⚡"),
        dict(href="/challenges/daily", label="Daily Challenges", icon="🌟"),
        dict(href="/challenges/weekly", label="Weekly Prompts", icon="📝"),
        dict(href="/challenges/streaks", label="Streaks", icon="🔥"),
        dict(href="/challenges/nominate", label="Nominate Challenge", icon="👍"),
        dict(href="/challenges/passport", label="Passion Passport", icon="📘"),
        dict(href="/competitions", label="Competitions", icon="🏆"),
        dict(href="/competitions/checklist", label="Competition Checklist", icon="☑"),
        dict(href="/showcases", label="Seasonal Events", icon="🎉"),
        dict(href="/leaderboards", label="Leaderboards", icon="📊"),
        dict(href="/rewards", label="Rewards", icon="🎁"),
        dict(href="/achievements/badges", label="Badge Gallery", icon="🏅"),
        dict(href="/student-of-month", label="Student of the Month", icon="⭐"),
        dict(href="/wall-of-fame", label="Wall of Fame", icon="🏛"),
    ]),
    *_group_links(NavGroup.INCUBATOR, 600, [
        dict(href="/incubator", label="Project Incubator", icon="🚀"),
        dict(href="/incubator/apply", label="Apply", icon="📩"),
        dict(href="/showcase", label="Student Showcase", icon="🎨"),
        dict(href="/showcase/submit", label="Share Your Work", icon="📤"),
    ]),
    *_group_links(NavGroup.OPPORTUNITIES, 700, [
        dict(href="/internships", label="Opportunities", icon="💼"),
        dict(href="/service-projects", label="Service Projects", icon="🤝"),
        dict(href="/resource-exchange", label="Resource Exchange", icon="🔄"),
        dict(href="/portfolio/templates", label="Portfolio Templates", icon="📂"),
        dict(href="/events/map", label="Chapter Events Map", icon="🗺"),
        dict(href="/positions", label="Open Positions", icon="📌", roles=APPLICANT_ROLES),
        dict(href="/applications", label="My Applications", icon="📨", roles=APPLICANT_ROLES),
        dict(href="/instructor/certification-pathway", label="Cert Pathway", icon="📜", roles=(R.INSTRUCTOR, R.ADMIN)),
    ]),
    *_group_links(NavGroup.COMMUNITY, 800, [
        dict(href="/mentorship", label="Mentorship", icon="🤝"),
        dict(href="/mentorship/mentees", label="My Mentees", icon="👥", roles=MENTOR_ROLES),
        dict(href="/my-mentor", label="My Mentor", icon="🧑‍🏫", roles=STUDENT_ONLY),
        dict(href="/events", label="Events & Prep", icon="📅"),
        dict(href="/calendar", label="Calendar", icon="🗓"),
        dict(href="/office-hours", label="Office Hours", icon="🕒"),
        dict(href="/check-in", label="Check-In", icon="✔", roles=STUDENT_ONLY),
        dict(href="/mentor/resources", label="Mentor Resources", icon="📚", roles=MENTOR_ROLES),
        dict(href="/attendance", label="Attendance", icon="📋", roles=INSTRUCTOR_ROLES),
    ]),
    *_group_links(NavGroup.CHAPTERS, 900, [
        dict(href="/chapters", label="Chapters", icon="🏢"),
        dict(href="/chapter", label="My Chapter", icon="🏠", roles=CHAPTER_LEAD_ONLY),
        dict(href="/chapter/recruiting", label="Chapter Recruiting", icon="🧑‍💼", roles=CHAPTER_LEAD_ONLY),
        dict(href="/chapter-lead/dashboard", label="Chapter Dashboard", icon="📊", roles=CHAPTER_LEAD_ONLY),
        dict(href="/chapter-lead/instructor-readiness", label="Instructor Readiness", icon="✅", roles=CHAPTER_LEAD_ONLY),
    ]),
    *_group_links(NavGroup.ACCOUNT, 1000, [
        dict(href="/certificates", label="My Certificates", icon="📜"),
        dict(href="/alumni", label="Alumni", icon="🎓", requires_award=True),
        dict(href="/college-advisor", label="College Advisor", icon="🧑‍💻", requires_award=True),
        dict(href="/profile", label="My Profile", icon="👤"),
        dict(href="/profile/timeline", label="My Journey", icon="🛤"),
        dict(href="/profile/xp", label="XP & Levels", icon="⬆"),
        dict(href="/profile/certifications", label="Certifications", icon="🏅"),
        dict(href="/settings/personalization", label="Personalization", icon="🎨"),
    ]),
    *_group_links(NavGroup.ADMIN_PEOPLE, 1100, [
        dict(href="/admin", label="Dashboard", icon="📊", roles=ADMIN_ONLY),
        dict(href="/admin/students", label="All Students", icon="👨‍🎓", roles=ADMIN_ONLY),
        dict(href="/admin/instructors", label="All Instructors", icon="👩‍🏫", roles=ADMIN_ONLY),
        dict(href="/admin/bulk-users", label="Bulk Users", icon="👥", roles=ADMIN_ONLY),
        dict(href="/admin/parent-approvals", label="Parent Approvals", icon="✔", roles=ADMIN_ONLY, badge_key="approvals"),
        dict(href="/admin/instructor-readiness", label="Instructor Readiness", icon="✅", roles=ADMIN_ONLY),
        dict(href="/admin/staff", label="Staff Reflections", icon="📝", roles=ADMIN_ONLY),
        dict(href="/admin/applications", label="Applications", icon="📋", roles=ADMIN_ONLY),
    ]),
    *_group_links(NavGroup.ADMIN_CONTENT, 1200, [
        dict(href="/admin/announcements", label="Announcements", icon="📢", roles=ADMIN_ONLY),
        dict(href="/admin/programs", label="Programs", icon="📦", roles=ADMIN_ONLY),
        dict(href="/admin/training", label="Training Modules", icon="🏫", roles=ADMIN_ONLY),
        dict(href="/admin/goals", label="Goals", icon="🎯", roles=ADMIN_ONLY),
        dict(href="/admin/reflections", label="Reflections", icon="💭", roles=ADMIN_ONLY),
        dict(href="/admin/reflection-forms", label="Forms", icon="📋", roles=ADMIN_ONLY),
        dict(href="/admin/incubator", label="Incubator Mgmt", icon="🚀", roles=ADMIN_ONLY),
    ]),
    *_group_links(NavGroup.ADMIN_REPORTS, 1300, [
        dict(href="/admin/analytics", label="Analytics", icon="📈", roles=ADMIN_ONLY),
        dict(href="/admin/chapter-reports", label="Chapter Reports", icon="📊", roles=ADMIN_ONLY),
        dict(href="/admin/chapters", label="All Chapters", icon="🏢", roles=ADMIN_ONLY),
        dict(href="/admin/pathway-tracking", label="Pathway Tracking", icon="🛤", roles=ADMIN_ONLY),
        dict(href="/admin/audit-log", label="Audit Log", icon="🗒", roles=ADMIN_ONLY),
        dict(href="/admin/volunteer-hours", label="Volunteer Hours", icon="⏰", roles=ADMIN_ONLY),
        dict(href="/admin/export", label="Data Export", icon="📥", roles=ADMIN_ONLY),
        dict(href="/admin/data-export", label="Export Tools", icon="💾", roles=ADMIN_ONLY),
    ]),
    *_group_links(NavGroup.ADMIN_OPS, 1400, [
        dict(href="/admin/waitlist", label="Waitlist", icon="⏳", roles=ADMIN_ONLY),
        dict(href="/admin/reminders", label="Reminders", icon="🔔", roles=ADMIN_ONLY),
        dict(href="/admin/emergency-broadcast", label="Emergency Broadcast", icon="🚨", roles=ADMIN_ONLY),
        dict(href="/admin/mentor-match", label="Mentor Match", icon="🤝", roles=ADMIN_ONLY),
        dict(href="/admin/alumni", label="Alumni", icon="🎓", roles=ADMIN_ONLY),
    ]),
]
