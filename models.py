from extensions import db
from datetime import datetime
from flask_login import UserMixin
from sqlalchemy import JSON
import enum
import uuid

PROFILE_ID = 'profile'


# Custom JSON type that uses JSONB on PostgreSQL and JSON/Text on SQLite
class SafeJSON(db.TypeDecorator):
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            from sqlalchemy.dialects.postgresql import JSONB
            return dialect.type_descriptor(JSONB())
        else:
            return dialect.type_descriptor(JSON())


class ExperienceType(str, enum.Enum):
    WORK = 'WORK'
    INTERNSHIP = 'INTERNSHIP'
    APPRENTICESHIP = 'APPRENTICESHIP'
    FREELANCE = 'FREELANCE'
    VOLUNTEER = 'VOLUNTEER'
    FIXED_TERM = 'FIXED_TERM'
    PERMANENT = 'PERMANENT'


class AuditAction(str, enum.Enum):
    CREATE = 'CREATE'
    UPDATE = 'UPDATE'
    DELETE = 'DELETE'


class AuditTargetType(str, enum.Enum):
    USER = 'USER'
    PROFILE = 'PROFILE'
    CV = 'CV'


def _new_id():
    return str(uuid.uuid4())


def _iso(value):
    return value.isoformat() if value else None


class User(UserMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(255))
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255))
    role = db.Column(db.String(50), nullable=False, default='viewer')
    image = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        # password_hash never leaves the server
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role,
            'image': self.image,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }


class Profile(db.Model):
    __tablename__ = 'profiles'
    id = db.Column(db.String(36), primary_key=True, default=PROFILE_ID)
    full_name = db.Column(db.String(255), nullable=False)
    headline = db.Column(db.String(255))
    location = db.Column(db.String(255))
    website = db.Column(db.String(500))
    email = db.Column(db.String(255))
    phone = db.Column(db.String(50))
    job_title = db.Column(db.String(255))
    about_md = db.Column(db.Text)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'fullName': self.full_name,
            'headline': self.headline,
            'location': self.location,
            'website': self.website,
            'email': self.email,
            'phone': self.phone,
            'jobTitle': self.job_title,
            'aboutMd': self.about_md,
            'updatedAt': _iso(self.updated_at),
        }


class Experience(db.Model):
    __tablename__ = 'experiences'
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    company = db.Column(db.String(255), nullable=False)
    company_url = db.Column(db.String(500))
    role = db.Column(db.String(255), nullable=False)
    start_date = db.Column(db.Date)
    end_date = db.Column(db.Date)
    location = db.Column(db.String(255))
    summary_md = db.Column(db.Text)
    order_index = db.Column(db.Integer, nullable=False, default=0)
    type = db.Column(db.Enum(ExperienceType, native_enum=False, length=32),
                     nullable=False, default=ExperienceType.WORK)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    cv_links = db.relationship('CvVersionExperience', back_populates='experience',
                               cascade='all')

    def to_dict(self):
        return {
            'id': self.id,
            'company': self.company,
            'companyUrl': self.company_url,
            'role': self.role,
            'startDate': _iso(self.start_date),
            'endDate': _iso(self.end_date),
            'location': self.location,
            'summaryMd': self.summary_md,
            'orderIndex': self.order_index,
            'type': self.type.value if self.type else None,
        }


class Education(db.Model):
    __tablename__ = 'educations'
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    school = db.Column(db.String(255), nullable=False)
    degree = db.Column(db.String(255), nullable=False)
    start_date = db.Column(db.Date)
    end_date = db.Column(db.Date)
    details_md = db.Column(db.Text)
    order_index = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    cv_links = db.relationship('CvVersionEducation', back_populates='education',
                               cascade='all')

    def to_dict(self):
        return {
            'id': self.id,
            'school': self.school,
            'degree': self.degree,
            'startDate': _iso(self.start_date),
            'endDate': _iso(self.end_date),
            'detailsMd': self.details_md,
            'orderIndex': self.order_index,
        }


class Project(db.Model):
    __tablename__ = 'projects'
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(255), nullable=False)
    picture = db.Column(db.String(500))
    preview_text = db.Column(db.Text)
    summary_md = db.Column(db.Text)
    url = db.Column(db.String(500))
    repo_url = db.Column(db.String(500))
    order_index = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    cv_links = db.relationship('CvVersionProject', back_populates='project',
                               cascade='all')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'picture': self.picture,
            'previewText': self.preview_text,
            'summaryMd': self.summary_md,
            'url': self.url,
            'repoUrl': self.repo_url,
            'orderIndex': self.order_index,
        }


class Skill(db.Model):
    __tablename__ = 'skills'
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(255), nullable=False)
    level = db.Column(db.String(100))
    order_index = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    cv_links = db.relationship('CvVersionSkill', back_populates='skill',
                               cascade='all')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'level': self.level,
            'orderIndex': self.order_index,
        }


class Link(db.Model):
    __tablename__ = 'links'
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(100), nullable=False)
    icon = db.Column(db.String(500))
    url = db.Column(db.String(500), nullable=False)
    order_index = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'icon': self.icon,
            'url': self.url,
            'orderIndex': self.order_index,
        }


class CvVersion(db.Model):
    __tablename__ = 'cv_versions'
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    title = db.Column(db.String(100), nullable=False)
    slug = db.Column(db.String(100), unique=True, nullable=False)
    theme = db.Column(db.String(50), nullable=False, default='modern')
    section_order = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Join rows are owned by the CV and go away with it
    experience_links = db.relationship('CvVersionExperience', back_populates='cv',
                                       cascade='all')
    project_links = db.relationship('CvVersionProject', back_populates='cv',
                                    cascade='all')
    skill_links = db.relationship('CvVersionSkill', back_populates='cv',
                                  cascade='all')
    education_links = db.relationship('CvVersionEducation', back_populates='cv',
                                      cascade='all')

    def to_dict(self):
        experiences_ids = [link.experience_id for link in self.experience_links]
        projects_ids = [link.project_id for link in self.project_links]
        skills_ids = [link.skill_id for link in self.skill_links]
        educations_ids = [link.education_id for link in self.education_links]
        return {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'theme': self.theme,
            'sectionOrder': self.section_order,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
            'experiencesIds': experiences_ids,
            'projectsIds': projects_ids,
            'skillsIds': skills_ids,
            'educationsIds': educations_ids,
            'counts': {
                'experiences': len(experiences_ids),
                'projects': len(projects_ids),
                'skills': len(skills_ids),
                'educations': len(educations_ids),
            },
        }


class CvVersionExperience(db.Model):
    __tablename__ = 'cv_version_experiences'
    cv_id = db.Column(db.String(36), db.ForeignKey('cv_versions.id', ondelete='CASCADE'),
                      primary_key=True)
    experience_id = db.Column(db.String(36), db.ForeignKey('experiences.id', ondelete='CASCADE'),
                              primary_key=True)

    cv = db.relationship('CvVersion', back_populates='experience_links')
    experience = db.relationship('Experience', back_populates='cv_links')


class CvVersionProject(db.Model):
    __tablename__ = 'cv_version_projects'
    cv_id = db.Column(db.String(36), db.ForeignKey('cv_versions.id', ondelete='CASCADE'),
                      primary_key=True)
    project_id = db.Column(db.String(36), db.ForeignKey('projects.id', ondelete='CASCADE'),
                           primary_key=True)

    cv = db.relationship('CvVersion', back_populates='project_links')
    project = db.relationship('Project', back_populates='cv_links')


class CvVersionSkill(db.Model):
    __tablename__ = 'cv_version_skills'
    cv_id = db.Column(db.String(36), db.ForeignKey('cv_versions.id', ondelete='CASCADE'),
                      primary_key=True)
    skill_id = db.Column(db.String(36), db.ForeignKey('skills.id', ondelete='CASCADE'),
                         primary_key=True)

    cv = db.relationship('CvVersion', back_populates='skill_links')
    skill = db.relationship('Skill', back_populates='cv_links')


class CvVersionEducation(db.Model):
    __tablename__ = 'cv_version_educations'
    cv_id = db.Column(db.String(36), db.ForeignKey('cv_versions.id', ondelete='CASCADE'),
                      primary_key=True)
    education_id = db.Column(db.String(36), db.ForeignKey('educations.id', ondelete='CASCADE'),
                             primary_key=True)

    cv = db.relationship('CvVersion', back_populates='education_links')
    education = db.relationship('Education', back_populates='cv_links')


class AuditLog(db.Model):
    __tablename__ = 'audit_logs'
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    action = db.Column(db.Enum(AuditAction, native_enum=False, length=16), nullable=False)
    target_type = db.Column(db.Enum(AuditTargetType, native_enum=False, length=32), nullable=False)
    target_id = db.Column(db.String(36), nullable=False)
    author_id = db.Column(db.String(36))
    meta = db.Column(SafeJSON, default={})
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.Index('idx_audit_target', 'target_type', 'target_id'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'action': self.action.value,
            'targetType': self.target_type.value,
            'targetId': self.target_id,
            'authorId': self.author_id,
            'meta': self.meta or {},
            'createdAt': _iso(self.created_at),
        }
