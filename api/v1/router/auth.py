from fastapi import APIRouter
from controller.users import UserOp
from schema.users import SignUp, SignIn, SignInOut

router = APIRouter(tags=["Auth"])


@router.post("/auth/register", response_model=SignInOut, status_code=201)
def register(user: SignUp):
    """
    Register a new student
    - Creates the student account
    - Returns an access token so the student is signed in straight away
    """
    user_details, access_token = UserOp.register(user)
    return {"user": user_details, "access_token": access_token, "token_type": "bearer"}


@router.post("/auth/login", response_model=SignInOut)
def login(user: SignIn):
    """
    Authenticate and login a user
    - Validates user credentials
    - Returns auth token on success
    """
    user_details, access_token = UserOp.login(user)
    return {"user": user_details, "access_token": access_token, "token_type": "bearer"}
