"""
Campaigns shown when the API is unreachable or returns nothing, so the
public listings never render empty.
"""
from .records import Campaign

PLACEHOLDER_CAMPAIGNS = [
    {
        "id": 1,
        "title": "Jum'at Berkah",
        "description": "Membantu yang membutuhkan",
        "details": "Program berbagi makanan setiap hari Jum'at untuk warga yang membutuhkan.",
        "start": "2025-06-01T00:00:00Z",
        "end": "2025-07-01T00:00:00Z",
        "cpocket": "BCA 12345678 a.n AmalSAS",
        "status": "active",
        "photo": "https://via.placeholder.com/600x300?text=Jumat+Berkah",
        "target_total": 5000000,
        "total_collected": 2500000,
        "category": "sosial",
        "location": "Jakarta",
        "user_id": 1,
        "user_name": "Admin",
        "created_at": "2025-06-01T00:00:00Z",
    },
    {
        "id": 2,
        "title": "Wakaf Qurban untuk Daerah Terpencil",
        "description": "Distribusi hewan qurban ke daerah yang jarang tersentuh bantuan",
        "details": "Penyaluran hewan qurban ke desa-desa terpencil.",
        "start": "2025-05-15T00:00:00Z",
        "end": "2025-07-15T00:00:00Z",
        "cpocket": "BRI 987654321 a.n Yayasan Amal",
        "status": "active",
        "photo": "https://via.placeholder.com/600x300?text=Wakaf+Qurban",
        "target_total": 25000000,
        "total_collected": 12500000,
        "category": "sosial",
        "location": "Nusa Tenggara Timur",
        "user_id": 2,
        "user_name": "AdminQurban",
        "created_at": "2025-05-15T00:00:00Z",
    },
    {
        "id": 3,
        "title": "Donasi Darurat Kemanusiaan Palestina",
        "description": "Bantuan kemanusiaan untuk korban terdampak konflik di Palestina",
        "details": "Bantuan pangan, medis dan tempat tinggal darurat.",
        "start": "2025-01-01T00:00:00Z",
        "end": "2025-12-31T00:00:00Z",
        "cpocket": "Mandiri 456789123 a.n SAS Donasi",
        "status": "active",
        "photo": "https://via.placeholder.com/600x300?text=Palestina",
        "target_total": 100000000,
        "total_collected": 92714567,
        "category": "bencana",
        "location": "Palestina",
        "user_id": 1,
        "user_name": "Admin",
        "created_at": "2025-01-01T00:00:00Z",
    },
]


def placeholder_campaigns() -> list[Campaign]:
    return [Campaign.from_api(item) for item in PLACEHOLDER_CAMPAIGNS]


def find_placeholder(campaign_id: int):
    for campaign in placeholder_campaigns():
        if campaign.id == campaign_id:
            return campaign
    return None
