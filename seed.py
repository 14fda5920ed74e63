from eco3.auth import get_password_hash
from eco3.database import SessionLocal, init_db
from eco3.models import Comment, Like, Post, User

# Create tables
init_db()

db = SessionLocal()

# Clear existing data
db.query(Like).delete()
db.query(Comment).delete()
db.query(Post).delete()
db.query(User).delete()
db.commit()

# Sample users (password, then profile fields)
user_rows = [
    ("john_doe", "john@example.com", "password123", "John Doe", "https://picsum.photos/200/300?random=42"),
    ("jane_smith", "jane@example.com", "admin123", "Jane Smith", "https://picsum.photos/200/300?random=17"),
    ("tech_guy", "tech@example.com", "user123", "Tech Enthusiast", "https://picsum.photos/200/300?random=88"),
    ("travel_lover", "travel@example.com", "travel123", "Travel Lover", "https://picsum.photos/200/300?random=33"),
    ("foodie", "food@example.com", "food123", "Foodie Fan", "https://picsum.photos/200/300?random=75"),
]
users = [
    User(
        username=username,
        email=email,
        password_hash=get_password_hash(password),
        full_name=full_name,
        profile_image_url=image,
    )
    for username, email, password, full_name, image in user_rows
]
db.add_all(users)
db.flush()

# Sample posts, by index into users
post_rows = [
    (0, "First Post", "My first week tracking commute emissions.", "https://picsum.photos/800/600?random=10"),
    (0, "Energy Tips", "Switching to LED bulbs cut my usage noticeably.", "https://picsum.photos/800/600?random=25"),
    (1, "Hello World", "Starting my low-carbon journey.", "https://picsum.photos/800/600?random=50"),
    (2, "Tech Review", "Smart thermostats reviewed for energy savings.", "https://picsum.photos/800/600?random=75"),
    (3, "Travel Diary", "Exploring new places by train instead of plane.", "https://picsum.photos/800/600?random=90"),
    (4, "Food Adventures", "A month of plant-based cooking.", "https://picsum.photos/800/600?random=3"),
]
posts = [
    Post(user_id=users[u].id, title=title, content=content, image_url=image)
    for u, title, content, image in post_rows
]
db.add_all(posts)
db.flush()

comments = [
    Comment(user_id=users[u].id, post_id=posts[p].id, content=content)
    for u, p, content in [
        (1, 0, "Great first post!"),
        (2, 0, "Very informative"),
        (0, 2, "Thanks for sharing!"),
        (3, 1, "Useful tips"),
        (4, 3, "Looking forward to more reviews"),
        (1, 4, "Amazing travel stories"),
        (0, 5, "Yummy content!"),
    ]
]
likes = [
    Like(user_id=users[u].id, post_id=posts[p].id)
    for u, p in [(1, 0), (2, 0), (3, 1), (0, 2), (4, 3), (1, 4), (2, 5)]
]

db.add_all(comments)
db.add_all(likes)
db.commit()

print("Database seeded successfully!")
print(f"  - {len(users)} users")
print(f"  - {len(posts)} posts")
print(f"  - {len(comments)} comments")
print(f"  - {len(likes)} likes")

db.close()
