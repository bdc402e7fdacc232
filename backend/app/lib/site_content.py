# app/lib/site_content.py
# Fixed marketing content served to the frontend.

REVIEWS = {
    "source": "Trustpilot",
    "rating": 4.9,
    "totalReviews": 234,
    "reviews": [
        {
            "id": 1,
            "name": "John D.",
            "rating": 5,
            "comment": "LifeLine Health Plans made my Medicare enrollment so easy! Their team walked me through every step.",
            "date": "2024-11-15",
        },
        {
            "id": 2,
            "name": "Sarah M.",
            "rating": 5,
            "comment": "Excellent service! They found me a better plan and saved me money. Highly recommend!",
            "date": "2024-11-10",
        },
        {
            "id": 3,
            "name": "Robert K.",
            "rating": 5,
            "comment": "As a small business owner, finding group insurance was overwhelming. LifeLine made it simple.",
            "date": "2024-11-05",
        },
    ],
}

CARRIERS = {
    "carriers": [
        {"name": "Blue Cross Blue Shield", "logo": "/logos/bcbs.png"},
        {"name": "Aetna", "logo": "/logos/aetna.png"},
        {"name": "Humana", "logo": "/logos/humana.png"},
        {"name": "Priority Health", "logo": "/logos/priority.png"},
        {"name": "HAP", "logo": "/logos/hap.png"},
        {"name": "United Healthcare", "logo": "/logos/united.png"},
        {"name": "Cigna", "logo": "/logos/cigna.png"},
        {"name": "Molina", "logo": "/logos/molina.png"},
    ]
}
