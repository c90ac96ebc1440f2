"""Deterministic demo content for every table."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable

from collabdb.scoring import calculate_synergy
from collabdb.tables import TABLE_NAMES, Row, now_iso, utc_now

logger = logging.getLogger(__name__)

COLLEGE_NAMES = (
    "IIT Bombay", "IIT Delhi", "IIT Madras", "IIT Kanpur", "IIT Kharagpur",
    "IIT Roorkee", "IIT Guwahati", "IIT Hyderabad", "IISc Bangalore", "BITS Pilani",
    "MIT", "Stanford University", "University of Cambridge", "ETH Zurich", "NUS",
    "Tsinghua University", "University of Tokyo", "Imperial College London", "KAIST", "NTU",
    "Princeton", "Harvard", "Caltech", "Oxford", "Yale",
    "UCLA", "Columbia", "Cornell", "UPenn", "University of Chicago",
)

COLLEGE_LOCATIONS = (
    "Mumbai, India", "New Delhi, India", "Chennai, India", "Kanpur, India", "Kharagpur, India",
    "Roorkee, India", "Guwahati, India", "Hyderabad, India", "Bangalore, India", "Pilani, India",
    "Cambridge, MA, USA", "Stanford, CA, USA", "Cambridge, UK", "Zurich, Switzerland", "Singapore",
    "Beijing, China", "Tokyo, Japan", "London, UK", "Daejeon, South Korea", "Singapore",
    "Princeton, NJ, USA", "Cambridge, MA, USA", "Pasadena, CA, USA", "Oxford, UK", "New Haven, CT, USA",
    "Los Angeles, CA, USA", "New York, NY, USA", "Ithaca, NY, USA", "Philadelphia, PA, USA", "Chicago, IL, USA",
)

PARTNERS = (
    ("NHSRCL", "Transportation", "New Delhi, India"),
    ("Reliance", "Energy", "Mumbai, India"),
    ("TCS", "IT Services", "Mumbai, India"),
    ("Infosys", "IT Services", "Bangalore, India"),
    ("Wipro", "IT Services", "Bangalore, India"),
    ("Tech Mahindra", "IT Services", "Pune, India"),
    ("L&T", "Engineering", "Mumbai, India"),
    ("BHEL", "Industrial", "New Delhi, India"),
    ("Mahindra", "Automotive", "Mumbai, India"),
    ("Adani", "Infrastructure", "Ahmedabad, India"),
    ("Google", "Technology", "Mountain View, USA"),
    ("Microsoft", "Technology", "Redmond, USA"),
    ("Amazon", "E-commerce, Cloud", "Seattle, USA"),
    ("Apple", "Technology", "Cupertino, USA"),
    ("IBM", "Technology, Consulting", "Armonk, USA"),
    ("Siemens", "Industrial Technology", "Munich, Germany"),
    ("Bosch", "Automotive, Tech", "Stuttgart, Germany"),
    ("Samsung", "Electronics", "Seoul, South Korea"),
    ("Huawei", "Telecom", "Shenzhen, China"),
    ("SAP", "Enterprise Software", "Walldorf, Germany"),
    ("Meta", "Social Media", "Menlo Park, USA"),
    ("NVIDIA", "AI Hardware", "Santa Clara, USA"),
    ("Tesla", "Automotive, AI", "Austin, USA"),
    ("Oracle", "Cloud Enterprise", "Austin, USA"),
    ("Intel", "Semiconductors", "Santa Clara, USA"),
    ("Adobe", "Creative Software", "San Jose, USA"),
    ("Salesforce", "CRM SaaS", "San Francisco, USA"),
    ("Cisco", "Networking Tech", "San Jose, USA"),
    ("Qualcomm", "Mobile Tech", "San Diego, USA"),
    ("Netflix", "Entertainment Streaming", "Los Gatos, USA"),
)

EXPERTISE_AREAS = (
    ("Artificial Intelligence", "ML, DL, AI systems"),
    ("Internet of Things", "Sensors and edge devices"),
    ("Cybersecurity", "Secure systems"),
    ("Robotics", "Autonomy and manipulation"),
    ("Cloud Computing", "Distributed systems"),
    ("Quantum Computing", "Quantum algorithms"),
    ("Energy Systems", "Smart grids"),
    ("Materials Science", "Advanced materials"),
    ("BioTechnology", "Bio/medical tech"),
    ("Computer Vision", "Imaging and perception"),
    ("Natural Language Processing", "Text and speech"),
    ("Blockchain", "Distributed ledger"),
)

PROJECT_TITLES = (
    "AI-Powered Predictive Maintenance",
    "Smart Grid Optimization",
    "Cybersecurity Threat Detection",
    "Robotics for Inspection",
    "NLP for Technical Documents",
    "Quantum Algorithm Benchmarking",
    "Advanced Material Characterization",
    "Biometric Authentication Systems",
    "Smart City Traffic Modeling",
    "Autonomous Drone Navigation",
)

CHALLENGE_THEMES = (
    "Operational Efficiency", "Reliability & Monitoring", "Security & Compliance",
    "Automation & Analytics", "Carbon Footprint Reduction", "Scalable Infrastructure",
    "Supply Chain Resilience", "Customer Experience AI",
)

STUDENT_NAMES = (
    "Amit Sharma", "Sarah Johnson", "Chen Wei", "Elena Rossi", "Hiroshi Tanaka",
    "Priya Nair", "James Miller", "Sofia Garcia", "Lucas Meyer", "Zoe Chen",
    "Arjun Gupta", "Emma Wilson", "Li Na", "Matteo Ricci", "Yuki Sato",
    "Anjali Devi", "William Brown", "Isabella Martinez", "Hans Schmidt", "Mia Wong",
    "Rohan Das", "Olivia Taylor", "Wang Jun", "Giulia Bianchi", "Kenji Ito",
    "Sita Ram", "Robert Smith", "Carmen Ortiz", "Felix Wagner", "Chloe Lin",
)

ACTIVITY_ACTIONS = (
    "Document Uploaded",
    "Milestone Completed",
    "IP Disclosure Submitted",
    "New Team Member Added",
    "Phase 1 Review Complete",
    "Funding Status Updated",
    "Meeting Scheduled",
    "Budget Report Generated",
)

USER_SESSIONS = (
    ("user_1", "Rajesh Kumar", "rajesh.kumar@rail-solutions.com", "Global Rail Solutions", "corporate", "Project Manager"),
    ("user_2", "Dr. Sarah Chen", "sarah.chen@iitb.ac.in", "IIT Bombay", "college", "Principal Investigator"),
    ("user_3", "Vikram Mehta", "vikram.mehta@tcs.com", "TCS", "corporate", "Technology Lead"),
    ("user_4", "Dr. Neha Singh", "neha.singh@iitd.ac.in", "IIT Delhi", "college", "Research Director"),
    ("user_5", "Priya Sharma", "priya.sharma@iitm.ac.in", "IIT Madras", "college", "Research Scientist"),
)

ROW_COUNT = 30


def _date_from(base: str, plus_days: int) -> str:
    return (date.fromisoformat(base) + timedelta(days=plus_days)).isoformat()


def _days_ago_factory(now: datetime) -> Callable[[int], str]:
    def days_ago(days: int) -> str:
        return now_iso(lambda: now - timedelta(days=days))

    return days_ago


def _cycle(options: tuple[str, ...], n: int) -> str:
    return options[n % len(options)]


def _seed_organizations(tables: dict[str, list[Row]], days_ago: Callable[[int], str]) -> None:
    tables["colleges"] = [
        {
            "id": i + 1,
            "name": COLLEGE_NAMES[i],
            "location": COLLEGE_LOCATIONS[i],
            "website": f"https://example.edu/{i + 1}",
            "research_strengths": "AI, Robotics, Systems, Quantum, Bio",
            "available_resources": "Labs, compute, partnerships, research grants",
            "success_rate": 80 + (i % 15),
            "past_partnerships_count": 10 + i * 2,
            "active_projects_count": 3 + (i % 7),
            "created_at": days_ago(200 + i),
        }
        for i in range(ROW_COUNT)
    ]
    tables["corporate_partners"] = [
        {
            "id": i + 1,
            "name": name,
            "industry": industry,
            "location": location,
            "website": f"https://example.com/company/{i + 1}",
            "company_size": "Large",
            "created_at": days_ago(300 + i),
        }
        for i, (name, industry, location) in enumerate(PARTNERS)
    ]
    tables["expertise_areas"] = [
        {"id": i + 1, "name": name, "description": description, "created_at": days_ago(400 - i)}
        for i, (name, description) in enumerate(EXPERTISE_AREAS)
    ]


def _project_area_ids(project_id: int) -> tuple[int, int]:
    count = len(EXPERTISE_AREAS)
    return ((project_id - 1) % count) + 1, ((project_id + 4) % count) + 1


def _challenge_area_ids(challenge_id: int) -> tuple[int, ...]:
    count = len(EXPERTISE_AREAS)
    if challenge_id % 2 == 0:
        # Even challenges share the first area of the same-numbered project
        return ((challenge_id - 1) % count) + 1, ((challenge_id + 6) % count) + 1
    return (((challenge_id + 6) % count) + 1,)


def _seed_research(tables: dict[str, list[Row]], days_ago: Callable[[int], str]) -> None:
    colleges = tables["colleges"]
    area_names = {area["id"]: area["name"] for area in tables["expertise_areas"]}

    projects = []
    for i in range(ROW_COUNT):
        project_id = i + 1
        college = colleges[i % len(colleges)]
        projects.append({
            "id": project_id,
            "college_id": college["id"],
            "title": f"Project {project_id}: {_cycle(PROJECT_TITLES, i)}",
            "description": (
                f"Applied research initiative #{project_id} with clear milestones and deployment "
                "targets. Focused on high-impact technology development."
            ),
            "funding_needed": 800000 + project_id * 25000,
            "funding_allocated": 500000 + project_id * 20000,
            "budget_utilized": 100000 + project_id * 5000,
            "trl_level": ((project_id - 1) % 9) + 1,
            "status": "completed" if i % 10 == 0 else "active",
            "team_lead": f"Dr. Expert {project_id}",
            "team_size": 4 + (project_id % 12),
            "project_type": ("software", "hardware", "system")[project_id % 3],
            "trl_history": [
                {"trl": 1, "date": days_ago(300 + project_id)},
                {"trl": max(1, (project_id - 1) % 9), "date": days_ago(100 + project_id)},
            ],
            "publications_count": project_id % 7,
            "college_name": college["name"],
            "start_date": _date_from("2024-01-01", project_id * 7),
            "end_date": _date_from("2025-12-31", project_id * 3),
            "created_at": days_ago(120 - project_id),
        })
    tables["research_projects"] = projects

    links = []
    for project in projects:
        first, second = _project_area_ids(project["id"])
        links.append({"research_project_id": project["id"], "expertise_area_id": first, "created_at": days_ago(60)})
        links.append({"research_project_id": project["id"], "expertise_area_id": second, "created_at": days_ago(59)})
    tables["research_project_expertise"] = links

    partners = tables["corporate_partners"]
    challenges = []
    for i in range(ROW_COUNT):
        challenge_id = i + 1
        partner = partners[i % len(partners)]
        challenges.append({
            "id": challenge_id,
            "corporate_partner_id": partner["id"],
            "title": f"Challenge {challenge_id}: {_cycle(CHALLENGE_THEMES, challenge_id)}",
            "description": (
                f"Industry partner challenge #{challenge_id} with measurable outcomes, seeking "
                "innovative academic collaboration for rapid prototyping and validation."
            ),
            "required_expertise": [area_names[a] for a in _challenge_area_ids(challenge_id)],
            "budget_min": 300000 + challenge_id * 15000,
            "budget_max": 600000 + challenge_id * 25000,
            "timeline_months": 6 + (challenge_id % 24),
            "status": "closed" if i % 5 == 0 else "open",
            "company_name": partner["name"],
            "industry": partner["industry"],
            "company_location": partner["location"],
            "created_at": days_ago(90 - challenge_id),
        })
    tables["industry_challenges"] = challenges

    scores = []
    for i in range(ROW_COUNT):
        project = projects[i % len(projects)]
        challenge = challenges[i % len(challenges)]
        expertise = [area_names[a] for a in _project_area_ids(project["id"])]
        synergy = calculate_synergy({**project, "expertise_areas": expertise}, challenge)
        scores.append({
            "id": i + 1,
            "research_project_id": project["id"],
            "industry_challenge_id": challenge["id"],
            "compatibility_score": synergy.score,
            "reasoning": synergy.reasoning,
            "strategic_fit": synergy.strategic_fit,
            "technical_overlap": synergy.technical_overlap,
            "created_at": days_ago(30 - (i + 1)),
        })
    tables["matchmaking_scores"] = scores

    tables["collaboration_requests"] = [
        {
            "id": i + 1,
            "corporate_partner_id": partners[i % len(partners)]["id"],
            "research_project_id": projects[i % len(projects)]["id"],
            "industry_challenge_id": challenges[i % len(challenges)]["id"],
            "project_brief": (
                f"Strategic collaboration brief for project {i + 1} and challenge {i + 1}, "
                "detailing joint R&D goals."
            ),
            "budget_proposed": 500000 + (i + 1) * 20000,
            "timeline_proposed": f"{6 + ((i + 1) % 18)} months",
            "status": ("accepted", "pending", "under_review")[(i + 1) % 3],
            "created_at": days_ago(50 - (i + 1)),
        }
        for i in range(ROW_COUNT)
    ]


def _agreement_status(agreement_id: int) -> str:
    return ("signed", "draft", "under_review", "approved")[agreement_id % 4]


def _seed_agreements(tables: dict[str, list[Row]], days_ago: Callable[[int], str]) -> None:
    agreements = []
    for request in tables["collaboration_requests"]:
        agreement_id = request["id"]
        signed = agreement_id % 4 == 0
        even = agreement_id % 2 == 0
        agreements.append({
            "id": agreement_id,
            "collaboration_request_id": request["id"],
            "agreement_type": "Joint Development Agreement" if even else "Research Collaboration Agreement",
            "ip_ownership_split": "60% College, 40% Corporate" if even else "70% College, 30% Corporate",
            "revenue_sharing_model": "50-50 revenue sharing",
            "confidentiality_terms": "Confidential for 5 years",
            "termination_clauses": "90-day termination notice",
            "compliance_requirements": "Compliance with applicable regulations",
            "status": _agreement_status(agreement_id),
            "college_signed_at": days_ago(5) if signed else None,
            "college_signatory": "Dr. Sarah Chen" if signed else None,
            "corporate_signed_at": days_ago(4) if signed else None,
            "corporate_signatory": "Rajesh Kumar" if signed else None,
            "college_approval_status": agreement_id % 3 == 0 or signed,
            "corporate_approval_status": agreement_id % 5 == 0 or signed,
            "created_at": days_ago(80 - agreement_id),
            "updated_at": days_ago(10 - agreement_id % 10),
        })
    tables["agreements"] = agreements

    tables["agreement_versions"] = [
        {
            "id": a["id"],
            "agreement_id": a["id"],
            "version_number": "v1.0",
            "created_at": days_ago(70 - a["id"]),
            "created_by": "System",
            "change_summary": "Initial draft",
        }
        for a in agreements
    ]
    tables["agreement_sections"] = [
        {
            "id": v["id"] * 10 + seq,
            "agreement_version_id": v["id"],
            "section_id": f"S{v['id']}_{seq}",
            "title": title,
            "content": "Section content for demo review and comments.",
            "display_order": seq,
            "created_at": days_ago(65 - v["id"]),
        }
        for v in tables["agreement_versions"]
        for seq, title in enumerate(("Scope", "IP & Licensing", "Confidentiality"), start=1)
    ]
    tables["agreement_checklist_items"] = [
        {
            "id": a["id"] * 10 + seq,
            "agreement_id": a["id"],
            "item_label": f"Checklist item {seq}",
            "item_key": f"item_{seq}",
            "is_checked": seq == 1,
            "display_order": seq,
            "created_at": days_ago(60 - a["id"]),
            "updated_at": days_ago(5),
        }
        for a in agreements
        for seq in range(1, 6)
    ]
    tables["agreement_comments"] = [
        {
            "id": a["id"] * 10 + seq,
            "agreement_id": a["id"],
            "section_id": f"S{a['id']}_{seq}",
            "author": "Reviewer" if seq == 1 else "Legal",
            "comment_text": "Comment for review and iteration.",
            "created_at": days_ago(20 - a["id"]),
        }
        for a in agreements
        for seq in (1, 2)
    ]
    tables["agreement_templates"] = [
        {
            "id": i + 1,
            "name": f"Template {i + 1}",
            "description": "Reusable agreement template for rapid drafting.",
            "agreement_type": "Joint Development Agreement" if i % 2 == 0 else "Research Collaboration Agreement",
            "ip_ownership_split": "60% College, 40% Corporate" if i % 2 == 0 else "70% College, 30% Corporate",
            "revenue_sharing_model": "50-50",
            "confidentiality_terms": "5 years",
            "termination_clauses": "90 days",
            "compliance_requirements": "General compliance",
            "created_at": days_ago(500 - i),
        }
        for i in range(10)
    ]

    tables["negotiation_messages"] = [
        {
            "id": i,
            "collaboration_request_id": i,
            "sender_name": "Corporate Rep" if i % 2 == 0 else "College Rep",
            "sender_organization": "Corporate Partner" if i % 2 == 0 else "College",
            "message_type": "text",
            "content": "Let's align on scope, deliverables, and milestones.",
            "is_system_message": False,
            "created_at": days_ago(14 - i % 14),
        }
        for i in range(1, 21)
    ]
    tables["project_scopes"] = [
        {
            "id": i,
            "collaboration_request_id": i,
            "version_number": 1,
            "scope_description": "Initial scope proposal for collaboration.",
            "deliverables": "Prototype, validation, deployment plan.",
            "timeline": f"{6 + i % 18} months",
            "budget": 400000 + i * 15000,
            "created_by": "System",
            "status": "approved" if i % 3 == 0 else "proposed",
            "created_at": days_ago(18 - i % 18),
        }
        for i in range(1, 21)
    ]


def _seed_execution(tables: dict[str, list[Row]], days_ago: Callable[[int], str]) -> None:
    projects = tables["research_projects"]
    active = [
        {
            "id": i + 1,
            "collaboration_request_id": i + 1,
            "project_name": f"Execution: {projects[i % len(projects)]['title']}",
            "description": (
                "Active execution phase with critical milestones and interdisciplinary team participation."
            ),
            "funding_allocated": 600000 + (i + 1) * 25000,
            "start_date": _date_from("2024-02-01", (i + 1) * 10),
            "end_date": _date_from("2025-12-31", (i + 1) * 4),
            "budget_utilized": 120000 + (i + 1) * 6000,
            "status": "completed" if i % 15 == 0 else "in_progress",
            "created_at": days_ago(40 - (i + 1)),
            "updated_at": days_ago(2),
        }
        for i in range(ROW_COUNT)
    ]
    tables["active_projects"] = active

    tables["project_milestones"] = [
        {
            "id": ap["id"] * 10 + seq,
            "active_project_id": ap["id"],
            "title": f"Milestone {ap['id']}.{seq}",
            "description": "Milestone deliverable with acceptance criteria.",
            "due_date": _date_from("2024-03-01", ap["id"] * 14 + seq * 21),
            "completion_date": None,
            "status": "pending",
            "deliverables": "Docs, prototype, evaluation",
            "created_at": days_ago(30),
            "updated_at": days_ago(1),
        }
        for ap in active
        for seq in (1, 2)
    ]
    tables["project_team_members"] = [
        {
            "id": ap["id"] * 10 + seq,
            "active_project_id": ap["id"],
            "name": f"Member {ap['id']}.{seq}",
            "role": "Lead" if seq == 1 else "Engineer",
            "email": f"member{ap['id']}_{seq}@example.com",
            "organization": "Corporate Partner" if ap["id"] % 2 == 0 else "College Lab",
            "created_at": days_ago(25),
        }
        for ap in active
        for seq in (1, 2)
    ]
    tables["project_documents"] = [
        {
            "id": i,
            "project_id": projects[i - 1]["id"],
            "file_name": f"document_{i}.pdf",
            "file_size": 200000 + i * 1000,
            "file_type": "application/pdf",
            "storage_path": f"projects/{i}/document_{i}.pdf",
            "uploaded_by": "Seeder",
            "uploaded_at": days_ago(10 - i % 10),
            "version": 1,
            "description": "Seeded project document metadata.",
        }
        for i in range(1, 21)
    ]
    tables["activity_logs"] = [
        {
            "id": i + 1,
            "project_id": projects[i % len(projects)]["id"],
            "action": _cycle(ACTIVITY_ACTIONS, i),
            "actor": "Rajesh Kumar" if i % 2 == 0 else "Dr. Sarah Chen",
            "timestamp": days_ago(i * 2),
            "details": f"System log for {_cycle(ACTIVITY_ACTIONS, i)} event.",
        }
        for i in range(25)
    ]


def _seed_ip(tables: dict[str, list[Row]], days_ago: Callable[[int], str]) -> None:
    projects = tables["research_projects"]
    areas = tables["expertise_areas"]
    disclosures = []
    for i in range(ROW_COUNT):
        ip_id = i + 1
        category = ("Software/Algorithm", "Device/System", "Process/Method")[ip_id % 3]
        disclosures.append({
            "id": ip_id,
            "research_project_id": projects[i % len(projects)]["id"],
            "title": f"Novel IP: {category} for {areas[ip_id % len(areas)]['name']}",
            "description": (
                f"Technological disclosure describing a novel technique in {category}, with "
                "significant industrial scalability and market readiness."
            ),
            "invention_category": category,
            "potential_applications": "Aviation, Rail, Renewable Energy, and Smart Manufacturing",
            "commercial_potential": (
                "High commercial potential with established licensing pathways and strong patentability."
            ),
            "prior_art_references": (
                "Referenced IEEE and USPTO archives for primary technical novelty validation."
            ),
            "status": ("under_review", "disclosed", "draft", "patent_pending")[ip_id % 4],
            "filing_date": _date_from("2024-03-01", ip_id * 5),
            "patent_number": f"US-{100000 + ip_id}-B2" if ip_id % 5 == 0 else None,
            "created_at": days_ago(35 - ip_id),
            "submission_date": days_ago(ip_id),
            "category": category,
        })
    tables["ip_disclosures"] = disclosures

    tables["ip_contributors"] = [
        {
            "id": ip["id"] * 10 + seq,
            "ip_disclosure_id": ip["id"],
            "contributor_name": f"Contributor {ip['id']}.{seq}",
            "organization": "College Lab" if seq == 1 else "Corporate Partner",
            "ownership_percentage": 60 if seq == 1 else 40,
            "role": "Inventor" if seq == 1 else "Co-Inventor",
            "created_at": days_ago(20),
        }
        for ip in disclosures
        for seq in (1, 2)
    ]
    tables["licensing_opportunities"] = [
        {
            "id": ip["id"],
            "ip_disclosure_id": ip["id"],
            "anonymized_title": f"Opportunity {ip['id']}",
            "anonymized_description": "Anonymized description suitable for public listing.",
            "licensing_type": "non-exclusive" if ip["id"] % 2 == 0 else "exclusive",
            "asking_price": 200000 + ip["id"] * 15000,
            "industry_sectors": ("Transportation", "Energy", "Enterprise Software")[ip["id"] % 3],
            "inquiries_count": 1,
            "visibility": "public",
            "status": "available",
            "created_at": days_ago(15 - ip["id"] % 15),
        }
        for ip in disclosures
    ]
    tables["licensing_inquiries"] = [
        {
            "id": i,
            "licensing_opportunity_id": i,
            "inquirer_name": f"Inquirer {i}",
            "inquirer_email": f"inquirer{i}@example.com",
            "inquirer_organization": f"Org {i}",
            "message": "Interested in exploring licensing terms and technical details.",
            "created_at": days_ago(7 - i % 7),
        }
        for i in range(1, 21)
    ]


def _seed_talent(tables: dict[str, list[Row]], days_ago: Callable[[int], str]) -> None:
    colleges = tables["colleges"]
    projects = tables["research_projects"]
    areas = tables["expertise_areas"]
    profiles = []
    for i in range(ROW_COUNT):
        student_id = i + 1
        profiles.append({
            "id": student_id,
            "college_id": colleges[i % len(colleges)]["id"],
            "name": STUDENT_NAMES[i],
            "email": f"student{student_id}@example.edu",
            "degree_level": ("PhD", "Masters", "Bachelors")[student_id % 3],
            "field_of_study": (
                "Computer Science", "Electrical Engineering", "Mechanical Engineering", "Data Science",
            )[student_id % 4],
            "graduation_year": 2024 + student_id % 3,
            "gpa": round(3.5 + (student_id % 40) / 100, 2),
            "bio": (
                f"Dedicated {'doctoral candidate' if student_id % 3 == 0 else 'graduate student'} "
                f"with strong focus on {areas[i % len(areas)]['name']} and practical implementation skills."
            ),
            "availability_status": "available" if student_id % 2 == 0 else "busy",
            "created_at": days_ago(70 - student_id),
            "updated_at": days_ago(3),
        })
    tables["student_profiles"] = profiles

    tables["student_skills"] = [
        {
            "id": sp["id"] * 10 + seq,
            "student_profile_id": sp["id"],
            "skill_name": skill,
            "proficiency_level": "advanced" if sp["id"] % 2 == 0 else "intermediate",
            "created_at": days_ago(41 - seq),
        }
        for sp in profiles
        for seq, skill in enumerate(("Python", "SQL"), start=1)
    ]
    tables["student_project_involvement"] = [
        {
            "id": sp["id"],
            "student_profile_id": sp["id"],
            "research_project_id": projects[(sp["id"] - 1) % len(projects)]["id"],
            "role": "Research Assistant",
            "contribution_description": "Contributed to experiments, data, and documentation.",
            "start_date": _date_from("2024-02-01", sp["id"] * 3),
            "end_date": None,
            "created_at": days_ago(20),
        }
        for sp in profiles
    ]

    partners = tables["corporate_partners"]
    tables["saved_candidates"] = [
        {
            "id": i,
            "corporate_partner_id": partners[(i - 1) % len(partners)]["id"],
            "student_profile_id": profiles[(i - 1) % len(profiles)]["id"],
            "notes": "Saved for follow-up discussion.",
            "interest_level": ("high", "medium", "low")[i % 3],
            "created_at": days_ago(12 - i % 12),
        }
        for i in range(1, 21)
    ]
    tables["interview_requests"] = [
        {
            "id": i,
            "student_profile_id": i,
            "requester_name": "Recruiter",
            "requester_email": "recruiter@example.com",
            "requester_organization": "Corporate Partner",
            "message": "Requesting a 30-minute interview to discuss experience and fit.",
            "status": ("approved", "pending", "declined", "pending")[i % 4],
            "created_at": days_ago(8 - i % 8),
        }
        for i in range(1, 21)
    ]
    tables["user_sessions"] = [
        {
            "id": i + 1,
            "user_id": user_id,
            "name": name,
            "email": email,
            "organization": organization,
            "organization_type": organization_type,
            "role": role,
            "created_at": days_ago(5 * (i + 1)),
        }
        for i, (user_id, name, email, organization, organization_type, role) in enumerate(USER_SESSIONS)
    ]


def create_demo_tables(now: datetime | None = None) -> dict[str, list[Row]]:
    """Build the initial content of every table.

    The same now always yields the same rows. Every foreign key points at a
    row that exists in its parent table.
    """
    days_ago = _days_ago_factory(now or utc_now())
    tables: dict[str, list[Row]] = {}
    _seed_organizations(tables, days_ago)
    _seed_research(tables, days_ago)
    _seed_agreements(tables, days_ago)
    _seed_execution(tables, days_ago)
    _seed_ip(tables, days_ago)
    _seed_talent(tables, days_ago)

    # Keep declaration order so table listings are stable
    ordered = {name: tables[name] for name in TABLE_NAMES}
    logger.info("Seeded %d rows across %d tables", sum(len(rows) for rows in ordered.values()), len(ordered))
    return ordered
