# layout/models/sample_contract.py
"""Sample employment contract data used by the contract view."""
from __future__ import annotations

SAMPLE_CONTRACT = {
    "companyName": "TechNova Solutions Inc.",
    "companyAddress": "123 Innovation Drive, Silicon Valley, CA 94025",
    "employeeName": "Jane Smith",
    "employeeRole": "Senior Frontend Engineer",
    "startDate": "October 25, 2023",
    "salary": "$145,000 per annum",
    "sections": [
        {
            "title": "1. Employment and Duties",
            "content": (
                "The Employee agrees to perform faithfully, industriously, and to the best of their "
                "ability, the duties described in Exhibit A attached hereto and such other duties as "
                "may be assigned to them from time to time by the Company. The Employee agrees to "
                "comply with all reasonable policies and procedures of the Company."
            ),
        },
        {
            "title": "2. Compensation",
            "content": (
                "As full compensation for all services rendered by the Employee, the Company shall "
                "pay the Employee a base salary at the rate specified above, payable in accordance "
                "with the Company's standard payroll practices. The Employee is also eligible for "
                "performance bonuses and equity grants as determined by the Company."
            ),
        },
        {
            "title": "3. Benefits",
            "content": (
                "The Employee shall be entitled to participate in all benefit programs that the "
                "Company establishes and makes available to its employees, including group health "
                "insurance, dental and vision plans, life insurance, and a 401(k) retirement plan, "
                "subject to the terms and conditions of those plans."
            ),
        },
        {
            "title": "4. Confidentiality",
            "content": (
                "The Employee acknowledges that they will have access to Confidential Information. "
                "The Employee agrees to hold all Confidential Information in strict confidence and "
                "not to use it, except as necessary to perform their duties, or to disclose it to "
                "any third party without the prior written consent of the Company. This obligation "
                "survives the termination of employment."
            ),
        },
        {
            "title": "5. Termination",
            "content": (
                "Either party may terminate this agreement at any time, with or without cause, by "
                "providing 30 days' written notice to the other party. Upon termination, the "
                "Employee shall return all property belonging to the Company."
            ),
        },
    ],
}
